"""Domain probe for comment repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CommentRepositoryProbe(Protocol):
    """Domain probe for comment repository operations."""

    def comment_created(self, comment_id: str, parent_id: str) -> None:
        """Record that a comment was created."""
        ...

    def comment_saved(self, comment_id: str) -> None:
        """Record that a comment was updated."""
        ...

    def comment_deleted(self, comment_id: str) -> None:
        """Record that a comment was deleted."""
        ...

    def comment_not_found(self, comment_id: str) -> None:
        """Record that a comment was not found."""
        ...

    def with_context(self, context: ObservationContext) -> CommentRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCommentRepositoryProbe:
    """Default implementation of CommentRepositoryProbe using structlog."""

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
    ) -> DefaultCommentRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultCommentRepositoryProbe(logger=self._logger, context=context)

    def comment_created(self, comment_id: str, parent_id: str) -> None:
        """Record that a comment was created."""
        self._logger.info(
            "comment_created",
            comment_id=comment_id,
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def comment_saved(self, comment_id: str) -> None:
        """Record that a comment was updated."""
        self._logger.info(
            "comment_saved",
            comment_id=comment_id,
            **self._get_context_kwargs(),
        )

    def comment_deleted(self, comment_id: str) -> None:
        """Record that a comment was deleted."""
        self._logger.info(
            "comment_deleted",
            comment_id=comment_id,
            **self._get_context_kwargs(),
        )

    def comment_not_found(self, comment_id: str) -> None:
        """Record that a comment was not found."""
        self._logger.debug(
            "comment_not_found",
            comment_id=comment_id,
            **self._get_context_kwargs(),
        )
