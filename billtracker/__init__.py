"""Bill reminder notification service."""
