"""Shared helpers: error taxonomy and logging."""
