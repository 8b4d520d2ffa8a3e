"""Shared helpers: request validation and metrics."""
