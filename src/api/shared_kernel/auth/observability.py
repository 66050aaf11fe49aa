"""Domain probe for token manager operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to bearer token verification. Token
strings are never passed to the probe.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TokenManagerProbe(Protocol):
    """Domain probe for token manager operations."""

    def identity_extracted(self, identity_id: str) -> None:
        """Record that a token was verified and mapped to an identity."""
        ...

    def token_rejected(self, reason: str) -> None:
        """Record that a token failed verification or claim extraction."""
        ...

    def with_context(self, context: ObservationContext) -> TokenManagerProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTokenManagerProbe:
    """Default implementation of TokenManagerProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTokenManagerProbe:
        """Create a new probe with observation context bound."""
        return DefaultTokenManagerProbe(logger=self._logger, context=context)

    def identity_extracted(self, identity_id: str) -> None:
        """Record that a token was verified and mapped to an identity."""
        self._logger.info(
            "token_identity_extracted",
            identity_id=identity_id,
            **self._get_context_kwargs(),
        )

    def token_rejected(self, reason: str) -> None:
        """Record that a token failed verification or claim extraction."""
        self._logger.warning(
            "token_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )
