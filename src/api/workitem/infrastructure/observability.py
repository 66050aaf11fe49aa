"""Domain probes for work item persistence.

Following Domain-Oriented Observability patterns, these probes capture
number allocation and work item repository events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class NumberAllocatorProbe(Protocol):
    """Domain probe for work item number allocation."""

    def sequence_started(self, space_id: str) -> None:
        """Record that a space allocated its first number."""
        ...

    def number_allocated(self, space_id: str, number: int, attempt: int) -> None:
        """Record that a number was handed out."""
        ...

    def allocation_conflict(self, space_id: str, attempt: int, error: str) -> None:
        """Record a retryable conflict with a concurrent allocation."""
        ...

    def allocation_exhausted(self, space_id: str, attempts: int) -> None:
        """Record that allocation gave up after its retry budget."""
        ...

    def with_context(self, context: ObservationContext) -> NumberAllocatorProbe:
        """Create a new probe with observation context bound."""
        ...


class WorkItemRepositoryProbe(Protocol):
    """Domain probe for work item repository operations."""

    def work_item_created(self, work_item_id: str, space_id: str, number: int) -> None:
        """Record that a work item was created."""
        ...

    def work_item_not_found(self, work_item_id: str) -> None:
        """Record that a work item was not found."""
        ...

    def with_context(self, context: ObservationContext) -> WorkItemRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultNumberAllocatorProbe:
    """Default implementation of NumberAllocatorProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultNumberAllocatorProbe:
        """Create a new probe with observation context bound."""
        return DefaultNumberAllocatorProbe(logger=self._logger, context=context)

    def sequence_started(self, space_id: str) -> None:
        """Record that a space allocated its first number."""
        self._logger.info(
            "work_item_number_sequence_started",
            space_id=space_id,
            **self._get_context_kwargs(),
        )

    def number_allocated(self, space_id: str, number: int, attempt: int) -> None:
        """Record that a number was handed out."""
        self._logger.debug(
            "work_item_number_allocated",
            space_id=space_id,
            number=number,
            attempt=attempt,
            **self._get_context_kwargs(),
        )

    def allocation_conflict(self, space_id: str, attempt: int, error: str) -> None:
        """Record a retryable conflict with a concurrent allocation."""
        self._logger.warning(
            "work_item_number_allocation_conflict",
            space_id=space_id,
            attempt=attempt,
            error=error,
            **self._get_context_kwargs(),
        )

    def allocation_exhausted(self, space_id: str, attempts: int) -> None:
        """Record that allocation gave up after its retry budget."""
        self._logger.error(
            "work_item_number_allocation_exhausted",
            space_id=space_id,
            attempts=attempts,
            **self._get_context_kwargs(),
        )


class DefaultWorkItemRepositoryProbe:
    """Default implementation of WorkItemRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultWorkItemRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultWorkItemRepositoryProbe(logger=self._logger, context=context)

    def work_item_created(self, work_item_id: str, space_id: str, number: int) -> None:
        """Record that a work item was created."""
        self._logger.info(
            "work_item_created",
            work_item_id=work_item_id,
            space_id=space_id,
            number=number,
            **self._get_context_kwargs(),
        )

    def work_item_not_found(self, work_item_id: str) -> None:
        """Record that a work item was not found."""
        self._logger.debug(
            "work_item_not_found",
            work_item_id=work_item_id,
            **self._get_context_kwargs(),
        )
