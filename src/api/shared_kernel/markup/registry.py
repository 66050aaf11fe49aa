"""Closed set of markup tags understood by the service.

Comment bodies and work item descriptions carry one of these tags to say
how their text should be rendered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from shared_kernel.exceptions import InvalidArgumentError

PLAINTEXT = "plaintext"
MARKDOWN = "markdown"
DEFAULT_MARKUP = PLAINTEXT

SUPPORTED_MARKUPS = frozenset({PLAINTEXT, MARKDOWN})

CONTENT_KEY = "content"
MARKUP_KEY = "markup"


def is_supported(markup: str | None) -> bool:
    """Return True only for a recognized, non-empty markup tag."""
    return markup in SUPPORTED_MARKUPS


def require_supported(markup: str | None) -> None:
    """Reject a given but unrecognized tag; an empty tag means the default.

    Raises:
        InvalidArgumentError: If ``markup`` is non-empty and not supported
    """
    if markup and not is_supported(markup):
        raise InvalidArgumentError("markup", markup, "unsupported markup")


def nil_safe_get(markup: str | None) -> str:
    """Return ``markup``, or the default tag when it is missing or empty.

    The value is not validated against the supported set.
    """
    if not markup:
        return DEFAULT_MARKUP
    return markup


@dataclass(frozen=True)
class MarkupContent:
    """A text body together with the markup it is written in."""

    content: str
    markup: str = DEFAULT_MARKUP

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any] | None) -> MarkupContent:
        """Build from a stored ``{"content": ..., "markup": ...}`` document.

        Unsupported or missing markup tags fall back to the default.
        """
        if not value:
            return cls(content="")
        markup = value.get(MARKUP_KEY)
        if not is_supported(markup):
            markup = DEFAULT_MARKUP
        return cls(content=str(value.get(CONTENT_KEY) or ""), markup=markup)

    def to_mapping(self) -> dict[str, str]:
        """Serialize to the stored document shape."""
        return {CONTENT_KEY: self.content, MARKUP_KEY: self.markup}
