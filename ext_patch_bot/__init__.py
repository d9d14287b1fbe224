"""Maintenance bot that patches extension repositories and opens pull requests."""

__version__ = "0.1.0"
