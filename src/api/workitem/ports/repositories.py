"""Repository protocols (ports) for the work item context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from workitem.domain import WorkItem


@runtime_checkable
class INumberAllocator(Protocol):
    """Hands out strictly increasing work item numbers per space.

    Atomicity comes from the backing store's transactions alone, so several
    processes may allocate from the same space concurrently.
    """

    async def next_val(self, space_id: UUID) -> int:
        """Allocate and return the next number of the space.

        The first number of a space is 1. A number is consumed even if the
        caller later fails to use it.

        Raises:
            ContentionExhaustedError: If conflicts persist past the retry budget
            InternalError: On any other store failure
        """
        ...

    async def current(self, space_id: UUID) -> int:
        """Return the last number handed out in the space, or 0."""
        ...


@runtime_checkable
class IWorkItemRepository(Protocol):
    """Repository for WorkItem aggregates."""

    async def create(self, work_item: WorkItem) -> WorkItem:
        """Allocate the next number of the space and persist the work item.

        Raises:
            InvalidArgumentError: If the title is empty or the description
                markup is not supported
        """
        ...

    async def load_by_id(self, work_item_id: UUID) -> WorkItem:
        """Retrieve a work item by id.

        Raises:
            NotFoundError: If the work item does not exist
        """
        ...

    async def load_by_number(self, space_id: UUID, number: int) -> WorkItem | None:
        """Retrieve a work item by its number within a space, or None."""
        ...

    async def list(
        self, space_id: UUID, offset: int, limit: int
    ) -> tuple[list[WorkItem], int]:
        """Return one page of the space's work items by number, plus the total.

        Raises:
            InvalidArgumentError: If offset < 0 or limit < 1
        """
        ...

    async def count(self, space_id: UUID) -> int:
        """Number of work items in the space."""
        ...
