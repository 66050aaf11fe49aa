"""Per-space work item number allocator.

Each space has one row in ``work_item_number_sequences`` holding the last
number handed out. ``next_val`` bumps that row with a single
``UPDATE ... RETURNING`` inside its own transaction, so the row lock (or the
serializable snapshot) of the database orders concurrent callers, including
callers in other processes. Nothing is locked in-process.
"""

from __future__ import annotations

import asyncio
import uuid
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared_kernel.exceptions import ContentionExhaustedError, InternalError
from workitem.infrastructure.models import WorkItemNumberSequenceModel
from workitem.infrastructure.observability import (
    DefaultNumberAllocatorProbe,
    NumberAllocatorProbe,
)
from workitem.ports.repositories import INumberAllocator

# serialization_failure, deadlock_detected
_RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def _is_retryable(error: DBAPIError) -> bool:
    """Whether ``error`` is a conflict with a concurrent allocation."""
    if isinstance(error, IntegrityError):
        # concurrent first allocation in the same space
        return True
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _RETRYABLE_SQLSTATES:
        return True
    return "database is locked" in str(orig)


class NumberAllocator(INumberAllocator):
    """Allocates work item numbers in transactions of its own.

    Numbers are committed before they are returned, independently of any
    transaction the caller has open. A caller that fails afterwards leaves a
    gap; the number is never handed out again.
    """

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        max_attempts: int = 5,
        retry_delay: float = 0.01,
        isolation_level: str | None = None,
        probe: NumberAllocatorProbe | None = None,
    ) -> None:
        """Initialize the allocator.

        Args:
            sessionmaker: Factory for the sessions each allocation runs in
            max_attempts: Attempts before giving up with ContentionExhaustedError
            retry_delay: Base delay in seconds between attempts (grows linearly)
            isolation_level: Transaction isolation for allocations. The default
                keeps the engine's (READ COMMITTED on PostgreSQL), where the
                row lock taken by the UPDATE orders concurrent callers;
                "SERIALIZABLE" turns contention into retried conflicts
            probe: Optional domain probe for observability
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._sessionmaker = sessionmaker
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._isolation_level = isolation_level
        self._probe = probe or DefaultNumberAllocatorProbe()

    async def next_val(self, space_id: UUID) -> int:
        """Allocate and return the next number of the space."""
        for attempt in range(1, self._max_attempts + 1):
            try:
                number = await self._increment(space_id)
            except DBAPIError as e:
                if not _is_retryable(e):
                    raise InternalError(
                        f"Failed to allocate work item number in space {space_id}"
                    ) from e
                self._probe.allocation_conflict(str(space_id), attempt, str(e.orig))
                if attempt < self._max_attempts:
                    await asyncio.sleep(self._retry_delay * attempt)
                continue
            except SQLAlchemyError as e:
                raise InternalError(
                    f"Failed to allocate work item number in space {space_id}"
                ) from e

            self._probe.number_allocated(str(space_id), number, attempt)
            return number

        self._probe.allocation_exhausted(str(space_id), self._max_attempts)
        raise ContentionExhaustedError(
            f"Could not allocate a work item number in space {space_id} "
            f"after {self._max_attempts} attempts"
        )

    async def current(self, space_id: UUID) -> int:
        """Return the last number handed out in the space, or 0."""
        stmt = select(WorkItemNumberSequenceModel.current_val).where(
            WorkItemNumberSequenceModel.space_id == space_id
        )
        try:
            async with self._sessionmaker() as session:
                value = (await session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise InternalError(
                f"Failed to read work item number of space {space_id}"
            ) from e
        return 0 if value is None else value

    async def _increment(self, space_id: UUID) -> int:
        """Run one allocation transaction; the row is created on first use."""
        bump = (
            update(WorkItemNumberSequenceModel)
            .where(WorkItemNumberSequenceModel.space_id == space_id)
            .values(current_val=WorkItemNumberSequenceModel.current_val + 1)
            .returning(WorkItemNumberSequenceModel.current_val)
            .execution_options(synchronize_session=False)
        )

        async with self._sessionmaker() as session:
            async with session.begin():
                if self._isolation_level is not None:
                    await session.connection(
                        execution_options={"isolation_level": self._isolation_level}
                    )

                number = (await session.execute(bump)).scalar_one_or_none()
                started = number is None
                if started:
                    session.add(
                        WorkItemNumberSequenceModel(
                            id=uuid.uuid4(), space_id=space_id, current_val=0
                        )
                    )
                    await session.flush()
                    number = (await session.execute(bump)).scalar_one()

        if started:
            self._probe.sequence_started(str(space_id))
        return number
