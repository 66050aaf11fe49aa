"""Space presentation layer."""

from space.presentation.routes import router

__all__ = ["router"]
