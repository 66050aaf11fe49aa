"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from account.dependencies import build_token_manager
from comment import presentation as comment_presentation
from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_session,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultDatabaseProbe, DefaultStartupProbe
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from shared_kernel.exceptions import ConfigurationError
from space import presentation as space_presentation
from workitem import presentation as workitem_presentation


@asynccontextmanager
async def wit_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Token manager construction (keys are read once)
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()

    try:
        manager = build_token_manager()
        probe.token_manager_configured(can_sign=manager.can_sign)
    except ConfigurationError as e:
        # Anonymous reads keep working; authenticated requests fail
        probe.token_manager_unavailable(error=str(e))

    probe.application_started(app_name=settings.app_name, version=__version__)

    yield

    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title="WIT API",
    description="Work item tracking: spaces, numbered work items and comments",
    version=__version__,
    lifespan=wit_lifespan,
)

app.include_router(space_presentation.router)
app.include_router(workitem_presentation.router)
app.include_router(workitem_presentation.render_router)
app.include_router(comment_presentation.router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> dict:
    """Check database connection health."""
    try:
        await session.execute(text("SELECT 1"))
        return {"status": "ok", "connected": True}
    except SQLAlchemyError as e:
        DefaultDatabaseProbe().health_check_failed(e)
        return {
            "status": "error",
            "connected": False,
            "error": "database unavailable",
        }
