"""Workflows that combine the storage and mail services."""
