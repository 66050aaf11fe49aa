"""Repository protocols (ports) for the space context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from space.domain import Space


@runtime_checkable
class ISpaceRepository(Protocol):
    """Repository for Space aggregates."""

    async def create(self, space: Space) -> Space:
        """Persist a new space, assigning an id when it is nil.

        Raises:
            InvalidArgumentError: If the name is empty
            ConflictError: If the id is already taken
        """
        ...

    async def load(self, space_id: UUID) -> Space:
        """Retrieve a space by id.

        Raises:
            NotFoundError: If the space does not exist
        """
        ...

    async def list(self, offset: int, limit: int) -> tuple[list[Space], int]:
        """Return one page of spaces ordered by creation time, plus the total.

        Raises:
            InvalidArgumentError: If offset < 0 or limit < 1
        """
        ...


@runtime_checkable
class IWorkItemCounter(Protocol):
    """Counts the work items of a space for the space document."""

    async def count(self, space_id: UUID) -> int:
        """Number of work items in the space."""
        ...
