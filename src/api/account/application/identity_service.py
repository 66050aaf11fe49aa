"""Identity application service for the account context.

Handles just-in-time provisioning of the identities that call the API.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from account.application.observability import (
    DefaultIdentityServiceProbe,
    IdentityServiceProbe,
)
from account.domain import IdentityRecord
from account.ports.repositories import IIdentityRepository
from infrastructure.database import transaction
from shared_kernel.auth import Identity


class IdentityService:
    """Application service for caller identities."""

    def __init__(
        self,
        identity_repository: IIdentityRepository,
        session: AsyncSession,
        probe: IdentityServiceProbe | None = None,
    ):
        """Initialize IdentityService with dependencies.

        Args:
            identity_repository: Repository for identity persistence
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._identity_repository = identity_repository
        self._session = session
        self._probe = probe or DefaultIdentityServiceProbe()

    async def ensure_identity(self, identity: Identity) -> IdentityRecord:
        """Ensure the caller's identity exists (find-or-create).

        A username that changed at the identity provider is synchronised.

        Args:
            identity: The identity extracted from the bearer token

        Returns:
            The stored identity record (existing or newly created)
        """
        try:
            async with transaction(self._session):
                existing = await self._identity_repository.get_by_id(identity.id)
                if existing:
                    if existing.username != identity.username:
                        existing.username = identity.username
                        await self._identity_repository.save(existing)
                        self._probe.identity_ensured(
                            identity_id=str(identity.id),
                            username=identity.username,
                            was_created=False,
                            was_updated=True,
                        )
                        return existing

                    self._probe.identity_ensured(
                        identity_id=str(identity.id),
                        username=identity.username,
                        was_created=False,
                        was_updated=False,
                    )
                    return existing

                record = IdentityRecord.from_identity(identity)
                await self._identity_repository.save(record)
                self._probe.identity_ensured(
                    identity_id=str(identity.id),
                    username=identity.username,
                    was_created=True,
                    was_updated=False,
                )
                return record

        except Exception as e:
            self._probe.identity_provision_failed(
                identity_id=str(identity.id),
                username=identity.username,
                error=str(e),
            )
            raise
