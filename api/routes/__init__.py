"""API route handlers."""

from api.routes import health, roots, verify

__all__ = ["health", "roots", "verify"]
