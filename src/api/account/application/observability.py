"""Domain probes for the account application layer.

Captures authentication outcomes and just-in-time identity provisioning.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthenticationProbe(Protocol):
    """Domain probe for request authentication."""

    def identity_authenticated(self, identity_id: str, username: str) -> None:
        """Record successful authentication via bearer token."""
        ...

    def authentication_failed(self, reason: str) -> None:
        """Record authentication failure."""
        ...

    def with_context(self, context: ObservationContext) -> AuthenticationProbe:
        """Create a new probe with observation context bound."""
        ...


class IdentityServiceProbe(Protocol):
    """Domain probe for identity provisioning."""

    def identity_ensured(
        self,
        identity_id: str,
        username: str,
        was_created: bool,
        was_updated: bool,
    ) -> None:
        """Record that an identity was ensured to exist (found or created)."""
        ...

    def identity_provision_failed(
        self,
        identity_id: str,
        username: str,
        error: str,
    ) -> None:
        """Record that identity provisioning failed."""
        ...

    def with_context(self, context: ObservationContext) -> IdentityServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthenticationProbe:
    """Default implementation of AuthenticationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthenticationProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthenticationProbe(logger=self._logger, context=context)

    def identity_authenticated(self, identity_id: str, username: str) -> None:
        """Record successful authentication via bearer token."""
        self._logger.info(
            "identity_authenticated",
            identity_id=identity_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def authentication_failed(self, reason: str) -> None:
        """Record authentication failure."""
        self._logger.warning(
            "authentication_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )


class DefaultIdentityServiceProbe:
    """Default implementation of IdentityServiceProbe using structlog."""

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
    ) -> DefaultIdentityServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultIdentityServiceProbe(logger=self._logger, context=context)

    def identity_ensured(
        self,
        identity_id: str,
        username: str,
        was_created: bool,
        was_updated: bool,
    ) -> None:
        """Record that an identity was ensured to exist."""
        self._logger.info(
            "identity_ensured",
            identity_id=identity_id,
            username=username,
            was_created=was_created,
            was_updated=was_updated,
            **self._get_context_kwargs(),
        )

    def identity_provision_failed(
        self,
        identity_id: str,
        username: str,
        error: str,
    ) -> None:
        """Record that identity provisioning failed."""
        self._logger.error(
            "identity_provision_failed",
            identity_id=identity_id,
            username=username,
            error=error,
            **self._get_context_kwargs(),
        )
