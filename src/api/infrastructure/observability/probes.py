"""Probe for the database engines behind the stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class DatabaseProbe(Protocol):
    """Events of the lazily created write and read engines."""

    def engine_created(self, role: str, url: str) -> None:
        """An engine for ``role`` ("write" or "read") was created."""
        ...

    def engine_disposed(self, role: str) -> None:
        """The pool of the ``role`` engine was closed."""
        ...

    def health_check_failed(self, error: Exception) -> None:
        """``SELECT 1`` against the store failed."""
        ...

    def with_context(self, context: ObservationContext) -> DatabaseProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultDatabaseProbe:
    """DatabaseProbe logging through structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        return {} if self._context is None else self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultDatabaseProbe:
        """Create a new probe with observation context bound."""
        return DefaultDatabaseProbe(logger=self._logger, context=context)

    def engine_created(self, role: str, url: str) -> None:
        # url comes from DatabaseSettings.connection_string, never with a password
        self._logger.info(
            "database_engine_created", role=role, url=url, **self._get_context_kwargs()
        )

    def engine_disposed(self, role: str) -> None:
        self._logger.info(
            "database_engine_disposed", role=role, **self._get_context_kwargs()
        )

    def health_check_failed(self, error: Exception) -> None:
        self._logger.error(
            "database_health_check_failed",
            error_type=type(error).__name__,
            error=str(error),
            **self._get_context_kwargs(),
        )
