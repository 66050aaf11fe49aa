"""Domain probe for the work item application service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class WorkItemServiceProbe(Protocol):
    """Domain probe for work item use cases."""

    def work_item_created(
        self, work_item_id: str, space_id: str, number: int, with_comment: bool
    ) -> None:
        """Record that a work item (and possibly its first comment) was created."""
        ...

    def work_item_creation_failed(self, space_id: str, error: str) -> None:
        """Record that creating a work item failed."""
        ...

    def with_context(self, context: ObservationContext) -> WorkItemServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultWorkItemServiceProbe:
    """Default implementation of WorkItemServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultWorkItemServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultWorkItemServiceProbe(logger=self._logger, context=context)

    def work_item_created(
        self, work_item_id: str, space_id: str, number: int, with_comment: bool
    ) -> None:
        """Record that a work item (and possibly its first comment) was created."""
        self._logger.info(
            "work_item_service_created",
            work_item_id=work_item_id,
            space_id=space_id,
            number=number,
            with_comment=with_comment,
            **self._get_context_kwargs(),
        )

    def work_item_creation_failed(self, space_id: str, error: str) -> None:
        """Record that creating a work item failed."""
        self._logger.error(
            "work_item_creation_failed",
            space_id=space_id,
            error=error,
            **self._get_context_kwargs(),
        )
