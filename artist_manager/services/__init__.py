"""Integrations with external services: the database and SMTP."""
