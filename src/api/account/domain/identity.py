"""Persisted identity records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from shared_kernel.auth import Identity

KEYCLOAK_PROVIDER = "kc"


@dataclass
class IdentityRecord:
    """An identity as stored in the identity store.

    Links the principal named by a bearer token to the user owning it.
    """

    id: UUID
    username: str
    user_id: UUID | None = None
    provider_type: str = KEYCLOAK_PROVIDER
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_identity(cls, identity: Identity) -> IdentityRecord:
        """Create a record for a caller identity taken from a token."""
        return cls(id=identity.id, username=identity.username)

    def to_identity(self) -> Identity:
        """Return the caller identity value object."""
        return Identity(id=self.id, username=self.username)
