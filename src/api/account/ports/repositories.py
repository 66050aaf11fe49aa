"""Repository protocols (ports) for the account context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from account.domain import IdentityRecord, User


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregates.

    Deleted users are invisible to every read.
    """

    async def create(self, user: User) -> User:
        """Persist a new user, assigning an id when it is nil.

        Raises:
            ConflictError: If the id or the email is already taken
        """
        ...

    async def save(self, user: User) -> User:
        """Write the mutable fields of an existing user.

        Raises:
            NotFoundError: If the user does not exist
        """
        ...

    async def load(self, user_id: UUID) -> User:
        """Retrieve a user by id.

        Raises:
            NotFoundError: If the user does not exist or was deleted
        """
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Retrieve a user by email, or None."""
        ...

    async def list(self) -> list[User]:
        """List live users ordered by creation time."""
        ...

    async def delete(self, user_id: UUID) -> None:
        """Soft-delete a user.

        Raises:
            NotFoundError: If the user does not exist
        """
        ...


@runtime_checkable
class IIdentityRepository(Protocol):
    """Repository for identity records."""

    async def save(self, identity: IdentityRecord) -> None:
        """Create the identity or update its username and owner."""
        ...

    async def get_by_id(self, identity_id: UUID) -> IdentityRecord | None:
        """Retrieve an identity by id, or None."""
        ...
