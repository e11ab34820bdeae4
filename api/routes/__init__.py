"""API route handlers."""

from api.routes import claims, distributions, health

__all__ = ["claims", "distributions", "health"]
