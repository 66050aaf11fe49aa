"""Structlog setup for the WIT API.

Probe events are rendered as colored console lines for humans and as one
JSON object per line everywhere else. Values under credential-like keys
are masked before rendering.
"""

import logging
import os
import sys
from typing import Any

import structlog

REDACTED = "***"
SENSITIVE_KEYS = frozenset({"token", "authorization", "password", "private_key"})


def redact_credentials(
    _logger: Any, _method: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask credential values a caller passed to a log event."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _wants_colors() -> bool:
    # FORCE_COLOR covers non-TTY environments such as containers
    forced = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    return forced or sys.stdout.isatty()


def configure_logging(debug: bool = False) -> None:
    """Install the structlog pipeline.

    Args:
        debug: Also emit debug-level probe events (e.g. store misses).
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        redact_credentials,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if _wants_colors():
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
