"""SQLAlchemy implementation of ISpaceRepository."""

from __future__ import annotations

import uuid
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database import transaction, translate_store_errors
from shared_kernel.exceptions import InvalidArgumentError, NotFoundError
from shared_kernel.identifiers import is_nil
from shared_kernel.paging import check_page_bounds
from space.domain import Space
from space.infrastructure.models import SpaceModel
from space.infrastructure.observability import (
    DefaultSpaceRepositoryProbe,
    SpaceRepositoryProbe,
)
from space.ports.repositories import ISpaceRepository


class SpaceRepository(ISpaceRepository):
    """Repository for Space aggregates backed by the spaces table."""

    def __init__(
        self, session: AsyncSession, probe: SpaceRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultSpaceRepositoryProbe()

    async def create(self, space: Space) -> Space:
        """Persist a new space, assigning an id when it is nil."""
        if not space.name or not space.name.strip():
            raise InvalidArgumentError("name", space.name, "must not be empty")
        if is_nil(space.id):
            space.id = uuid.uuid4()

        with translate_store_errors("create space"):
            async with transaction(self._session):
                model = SpaceModel(
                    id=space.id,
                    name=space.name,
                    description=space.description,
                    owner_id=space.owner_id,
                    version=0,
                )
                self._session.add(model)
                await self._session.flush()
                created = self._to_domain(model)

        self._probe.space_created(str(created.id), created.name)
        return created

    async def load(self, space_id: UUID) -> Space:
        """Retrieve a space by id."""
        stmt = select(SpaceModel).where(
            SpaceModel.id == space_id, SpaceModel.deleted_at.is_(None)
        )
        with translate_store_errors("load space"):
            async with transaction(self._session):
                result = await self._session.execute(stmt)
                model = result.scalar_one_or_none()
                if model is None:
                    self._probe.space_not_found(str(space_id))
                    raise NotFoundError("space", space_id)
                return self._to_domain(model)

    async def list(self, offset: int, limit: int) -> tuple[list[Space], int]:
        """Return one page of spaces ordered by creation time, plus the total."""
        check_page_bounds(offset, limit)
        live = SpaceModel.deleted_at.is_(None)
        page_stmt = (
            select(SpaceModel)
            .where(live)
            .order_by(SpaceModel.created_at, SpaceModel.id)
            .offset(offset)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(SpaceModel).where(live)

        with translate_store_errors("list spaces"):
            async with transaction(self._session):
                total = (await self._session.execute(count_stmt)).scalar_one()
                result = await self._session.execute(page_stmt)
                spaces = [self._to_domain(model) for model in result.scalars().all()]

        self._probe.spaces_listed(count=len(spaces), total=total)
        return spaces, total

    @staticmethod
    def _to_domain(model: SpaceModel) -> Space:
        return Space(
            id=model.id,
            name=model.name,
            description=model.description,
            owner_id=model.owner_id,
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
