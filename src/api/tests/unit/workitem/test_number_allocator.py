"""Tests for the per-space work item number allocator."""

from __future__ import annotations

import asyncio
import sqlite3
import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError, InvalidRequestError, OperationalError

from shared_kernel.exceptions import ContentionExhaustedError, InternalError
from workitem.infrastructure import NumberAllocator
from workitem.infrastructure.observability import NumberAllocatorProbe


@pytest.fixture
def probe() -> MagicMock:
    return MagicMock(spec=NumberAllocatorProbe)


@pytest.fixture
def allocator(sessionmaker, probe) -> NumberAllocator:
    return NumberAllocator(sessionmaker, retry_delay=0, probe=probe)


def _locked() -> OperationalError:
    return OperationalError(
        "UPDATE work_item_number_sequences",
        {},
        sqlite3.OperationalError("database is locked"),
    )


class TestNextVal:
    """Tests for NumberAllocator.next_val against SQLite."""

    @pytest.mark.asyncio
    async def test_first_number_is_one(self, allocator, probe):
        """A space's sequence starts at 1."""
        space_id = uuid.uuid4()

        assert await allocator.next_val(space_id) == 1
        probe.sequence_started.assert_called_once_with(str(space_id))

    @pytest.mark.asyncio
    async def test_sequential_numbers_increase(self, allocator):
        space_id = uuid.uuid4()

        numbers = [await allocator.next_val(space_id) for _ in range(5)]

        assert numbers == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_concurrent_numbers_are_unique(self, allocator):
        """Concurrent callers never receive the same number."""
        space_id = uuid.uuid4()

        numbers = await asyncio.gather(
            *(allocator.next_val(space_id) for _ in range(10))
        )

        assert sorted(numbers) == list(range(1, 11))

    @pytest.mark.asyncio
    async def test_spaces_are_independent(self, allocator):
        """Each space has its own sequence."""
        first, second = uuid.uuid4(), uuid.uuid4()

        await allocator.next_val(first)
        await allocator.next_val(first)

        assert await allocator.next_val(second) == 1
        assert await allocator.next_val(first) == 3

    @pytest.mark.asyncio
    async def test_number_survives_caller_rollback(self, allocator, session):
        """Numbers are committed even when the caller's transaction aborts."""
        space_id = uuid.uuid4()

        with pytest.raises(RuntimeError):
            async with session.begin():
                await allocator.next_val(space_id)
                raise RuntimeError("caller failed")

        assert await allocator.current(space_id) == 1
        assert await allocator.next_val(space_id) == 2


class TestCurrent:
    """Tests for NumberAllocator.current."""

    @pytest.mark.asyncio
    async def test_current_without_sequence_is_zero(self, allocator):
        assert await allocator.current(uuid.uuid4()) == 0

    @pytest.mark.asyncio
    async def test_current_does_not_allocate(self, allocator):
        """Reading the sequence leaves it unchanged."""
        space_id = uuid.uuid4()
        await allocator.next_val(space_id)

        assert await allocator.current(space_id) == 1
        assert await allocator.current(space_id) == 1
        assert await allocator.next_val(space_id) == 2


class TestRetries:
    """Tests for the bounded retry loop."""

    @pytest.mark.asyncio
    async def test_retries_after_conflict(self, allocator, probe):
        """A conflicting first insert is retried."""
        space_id = uuid.uuid4()
        conflict = IntegrityError("INSERT", {}, sqlite3.IntegrityError("UNIQUE"))

        with patch.object(
            allocator, "_increment", AsyncMock(side_effect=[conflict, 7])
        ):
            assert await allocator.next_val(space_id) == 7

        probe.allocation_conflict.assert_called_once()
        probe.number_allocated.assert_called_once_with(str(space_id), 7, 2)

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, sessionmaker, probe):
        """Persistent contention ends in ContentionExhaustedError."""
        allocator = NumberAllocator(
            sessionmaker, max_attempts=3, retry_delay=0, probe=probe
        )
        increment = AsyncMock(side_effect=_locked())

        with patch.object(allocator, "_increment", increment):
            with pytest.raises(ContentionExhaustedError):
                await allocator.next_val(uuid.uuid4())

        assert increment.await_count == 3
        assert probe.allocation_conflict.call_count == 3
        probe.allocation_exhausted.assert_called_once()

    @pytest.mark.asyncio
    async def test_other_database_errors_are_not_retried(self, allocator):
        """Errors unrelated to contention fail immediately."""
        failure = OperationalError("UPDATE", {}, sqlite3.OperationalError("disk I/O"))
        increment = AsyncMock(side_effect=failure)

        with patch.object(allocator, "_increment", increment):
            with pytest.raises(InternalError) as exc_info:
                await allocator.next_val(uuid.uuid4())

        assert increment.await_count == 1
        assert exc_info.value.__cause__ is failure

    @pytest.mark.asyncio
    async def test_non_dbapi_errors_are_internal(self, allocator):
        increment = AsyncMock(side_effect=InvalidRequestError("broken"))

        with patch.object(allocator, "_increment", increment):
            with pytest.raises(InternalError):
                await allocator.next_val(uuid.uuid4())

    def test_max_attempts_must_be_positive(self, sessionmaker):
        with pytest.raises(ValueError):
            NumberAllocator(sessionmaker, max_attempts=0)


class TestCancellation:
    """Tests for cancelling an allocation."""

    @pytest.mark.asyncio
    async def test_cancelled_while_waiting_to_retry(self, sessionmaker, probe):
        """Cancellation during the back-off ends the loop with CancelledError."""
        allocator = NumberAllocator(sessionmaker, retry_delay=10, probe=probe)
        increment = AsyncMock(side_effect=[_locked(), 1])

        with patch.object(allocator, "_increment", increment):
            task = asyncio.create_task(allocator.next_val(uuid.uuid4()))
            for _ in range(100):
                if probe.allocation_conflict.called:
                    break
                await asyncio.sleep(0)
            task.cancel()

            with pytest.raises(asyncio.CancelledError):
                await task

        assert increment.await_count == 1
        probe.number_allocated.assert_not_called()
        probe.allocation_exhausted.assert_not_called()

    @pytest.mark.asyncio
    async def test_cancelled_allocation_does_not_hand_out_a_number(
        self, allocator, sessionmaker
    ):
        """A cancelled first allocation leaves the sequence untouched."""
        space_id = uuid.uuid4()
        task = asyncio.create_task(allocator.next_val(space_id))
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert await allocator.current(space_id) == 0
        assert await allocator.next_val(space_id) == 1
