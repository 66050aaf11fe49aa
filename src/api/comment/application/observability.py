"""Domain probe for the comment application service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CommentServiceProbe(Protocol):
    """Domain probe for comment use cases."""

    def comment_access_denied(
        self, comment_id: str, identity_id: str, action: str
    ) -> None:
        """Record that a non-author tried to change a comment."""
        ...

    def with_context(self, context: ObservationContext) -> CommentServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCommentServiceProbe:
    """Default implementation of CommentServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultCommentServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultCommentServiceProbe(logger=self._logger, context=context)

    def comment_access_denied(
        self, comment_id: str, identity_id: str, action: str
    ) -> None:
        """Record that a non-author tried to change a comment."""
        self._logger.warning(
            "comment_access_denied",
            comment_id=comment_id,
            identity_id=identity_id,
            action=action,
            **self._get_context_kwargs(),
        )
