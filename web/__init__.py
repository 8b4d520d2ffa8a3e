"""HTTP layer of the promotion service."""

from .app import create_app

__all__ = ["create_app"]
