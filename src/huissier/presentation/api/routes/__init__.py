"""API routes."""

from huissier.presentation.api.routes import auth, health

__all__ = ["auth", "health"]
