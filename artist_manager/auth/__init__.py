"""Passwords, session tokens and role-based request authorization."""
