"""Domain probes for account repository operations.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events related to user and identity persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_created(self, user_id: str) -> None:
        """Record that a user was created."""
        ...

    def user_saved(self, user_id: str) -> None:
        """Record that a user was updated."""
        ...

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that a user was not found."""
        ...

    def user_deleted(self, user_id: str) -> None:
        """Record that a user was soft-deleted."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class IdentityRepositoryProbe(Protocol):
    """Domain probe for identity repository operations."""

    def identity_saved(self, identity_id: str, username: str) -> None:
        """Record that an identity was created or updated."""
        ...

    def identity_not_found(self, identity_id: str) -> None:
        """Record that an identity was not found."""
        ...

    def with_context(self, context: ObservationContext) -> IdentityRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_created(self, user_id: str) -> None:
        """Record that a user was created."""
        self._logger.info(
            "user_created",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_saved(self, user_id: str) -> None:
        """Record that a user was updated."""
        self._logger.info(
            "user_saved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        """Record that a user was not found."""
        self._logger.debug(
            "user_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: str) -> None:
        """Record that a user was soft-deleted."""
        self._logger.info(
            "user_deleted",
            user_id=user_id,
            **self._get_context_kwargs(),
        )


class DefaultIdentityRepositoryProbe:
    """Default implementation of IdentityRepositoryProbe using structlog."""

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
    ) -> DefaultIdentityRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultIdentityRepositoryProbe(logger=self._logger, context=context)

    def identity_saved(self, identity_id: str, username: str) -> None:
        """Record that an identity was created or updated."""
        self._logger.info(
            "identity_saved",
            identity_id=identity_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def identity_not_found(self, identity_id: str) -> None:
        """Record that an identity was not found."""
        self._logger.debug(
            "identity_not_found",
            identity_id=identity_id,
            **self._get_context_kwargs(),
        )
