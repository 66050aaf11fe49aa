"""Work item presentation layer."""

from workitem.presentation.routes import render_router, router

__all__ = ["render_router", "router"]
