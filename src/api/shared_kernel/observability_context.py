"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped and domain-relevant metadata that should be
    included with all instrumentation events.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        identity_id: Identity of the caller (if authenticated).
        space_id: Space the operation is scoped to (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", space_id="...")
        probe = DefaultNumberAllocatorProbe().with_context(context)
    """

    request_id: str | None = None
    identity_id: str | None = None
    space_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.identity_id is not None:
            result["identity_id"] = self.identity_id
        if self.space_id is not None:
            result["space_id"] = self.space_id
        result.update(self.extra)
        return result

    def with_space(self, space_id: str) -> ObservationContext:
        """Create a new context with the space set."""
        return ObservationContext(
            request_id=self.request_id,
            identity_id=self.identity_id,
            space_id=space_id,
            extra=self.extra,
        )

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            request_id=self.request_id,
            identity_id=self.identity_id,
            space_id=self.space_id,
            extra={**self.extra, **kwargs},
        )
