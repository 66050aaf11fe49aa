"""Unit tests for logging configuration and infrastructure probes."""

from __future__ import annotations

from unittest.mock import MagicMock

from infrastructure.logging import REDACTED, configure_logging, redact_credentials
from infrastructure.observability import (
    DefaultDatabaseProbe,
    DefaultStartupProbe,
    ObservationContext,
)


class TestRedaction:
    """Credential values never reach a rendered event."""

    def test_sensitive_keys_are_masked(self):
        event = redact_credentials(
            None, "info", {"event": "x", "token": "eyJ...", "user": "alice"}
        )

        assert event["token"] == REDACTED
        assert event["user"] == "alice"

    def test_events_without_credentials_are_unchanged(self):
        event = {"event": "x", "space_id": "s"}

        assert redact_credentials(None, "info", dict(event)) == event

    def test_configure_logging_runs(self):
        configure_logging(debug=True)
        configure_logging(debug=False)


class TestDatabaseProbe:
    """Tests for DefaultDatabaseProbe."""

    def test_engine_created(self):
        logger = MagicMock()
        probe = DefaultDatabaseProbe(logger=logger)

        probe.engine_created(role="write", url="postgresql://wit@db:5432/wit")

        logger.info.assert_called_once_with(
            "database_engine_created",
            role="write",
            url="postgresql://wit@db:5432/wit",
        )

    def test_context_is_included(self):
        logger = MagicMock()
        probe = DefaultDatabaseProbe(logger=logger).with_context(
            ObservationContext(request_id="req-1")
        )

        probe.engine_disposed(role="read")

        assert logger.info.call_args.kwargs["request_id"] == "req-1"

    def test_health_check_failed_is_an_error(self):
        logger = MagicMock()

        DefaultDatabaseProbe(logger=logger).health_check_failed(RuntimeError("down"))

        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["error"] == "down"


class TestStartupProbe:
    """Tests for DefaultStartupProbe."""

    def test_token_manager_unavailable_is_a_warning(self):
        logger = MagicMock()

        DefaultStartupProbe(logger=logger).token_manager_unavailable(error="no key")

        logger.warning.assert_called_once()
