"""FastAPI dependency injection for the space context."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from space.infrastructure import SpaceRepository
from space.infrastructure.observability import (
    DefaultSpaceRepositoryProbe,
    SpaceRepositoryProbe,
)


def get_space_repository_probe() -> SpaceRepositoryProbe:
    """Get SpaceRepositoryProbe instance."""
    return DefaultSpaceRepositoryProbe()


def get_space_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[SpaceRepositoryProbe, Depends(get_space_repository_probe)],
) -> SpaceRepository:
    """Get SpaceRepository instance.

    Args:
        session: Async database session
        probe: Space repository probe for observability
    """
    return SpaceRepository(session=session, probe=probe)
