"""Markup readers keyed by file extension."""
