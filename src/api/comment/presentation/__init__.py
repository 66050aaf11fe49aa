"""Comment presentation layer."""

from comment.presentation.routes import router

__all__ = ["router"]
