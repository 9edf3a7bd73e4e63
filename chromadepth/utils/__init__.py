"""Shared helpers: logging, timing and color parsing."""
