"""Domain probe for space repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class SpaceRepositoryProbe(Protocol):
    """Domain probe for space repository operations."""

    def space_created(self, space_id: str, name: str) -> None:
        """Record that a space was created."""
        ...

    def space_not_found(self, space_id: str) -> None:
        """Record that a space was not found."""
        ...

    def spaces_listed(self, count: int, total: int) -> None:
        """Record that a page of spaces was listed."""
        ...

    def with_context(self, context: ObservationContext) -> SpaceRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSpaceRepositoryProbe:
    """Default implementation of SpaceRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultSpaceRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultSpaceRepositoryProbe(logger=self._logger, context=context)

    def space_created(self, space_id: str, name: str) -> None:
        """Record that a space was created."""
        self._logger.info(
            "space_created",
            space_id=space_id,
            name=name,
            **self._get_context_kwargs(),
        )

    def space_not_found(self, space_id: str) -> None:
        """Record that a space was not found."""
        self._logger.debug(
            "space_not_found",
            space_id=space_id,
            **self._get_context_kwargs(),
        )

    def spaces_listed(self, count: int, total: int) -> None:
        """Record that a page of spaces was listed."""
        self._logger.debug(
            "spaces_listed",
            count=count,
            total=total,
            **self._get_context_kwargs(),
        )
