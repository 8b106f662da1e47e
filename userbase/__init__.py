"""User management API."""
