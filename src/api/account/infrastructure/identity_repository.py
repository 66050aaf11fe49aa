"""SQLAlchemy implementation of IIdentityRepository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from account.domain import IdentityRecord
from account.infrastructure.models import IdentityModel
from account.infrastructure.observability import (
    DefaultIdentityRepositoryProbe,
    IdentityRepositoryProbe,
)
from account.ports.repositories import IIdentityRepository
from infrastructure.database import transaction, translate_store_errors


class IdentityRepository(IIdentityRepository):
    """Repository for identity records backed by the identities table."""

    def __init__(
        self, session: AsyncSession, probe: IdentityRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultIdentityRepositoryProbe()

    async def save(self, identity: IdentityRecord) -> None:
        """Create the identity or update its username and owner."""
        with translate_store_errors("save identity"):
            async with transaction(self._session):
                model = await self._get_model(identity.id)
                if model:
                    model.username = identity.username
                    model.user_id = identity.user_id
                    model.provider_type = identity.provider_type
                else:
                    model = IdentityModel(
                        id=identity.id,
                        username=identity.username,
                        user_id=identity.user_id,
                        provider_type=identity.provider_type,
                    )
                    self._session.add(model)
                await self._session.flush()

        self._probe.identity_saved(str(identity.id), identity.username)

    async def get_by_id(self, identity_id: UUID) -> IdentityRecord | None:
        """Retrieve an identity by id, or None."""
        with translate_store_errors("load identity"):
            async with transaction(self._session):
                model = await self._get_model(identity_id)
                if model is None:
                    self._probe.identity_not_found(str(identity_id))
                    return None
                return IdentityRecord(
                    id=model.id,
                    username=model.username,
                    user_id=model.user_id,
                    provider_type=model.provider_type,
                    created_at=model.created_at,
                    updated_at=model.updated_at,
                )

    async def _get_model(self, identity_id: UUID) -> IdentityModel | None:
        stmt = select(IdentityModel).where(
            IdentityModel.id == identity_id, IdentityModel.deleted_at.is_(None)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()
