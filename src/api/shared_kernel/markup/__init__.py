"""Markup tags and rendering shared by comments and work items."""

from shared_kernel.markup.registry import (
    DEFAULT_MARKUP,
    MARKDOWN,
    PLAINTEXT,
    SUPPORTED_MARKUPS,
    MarkupContent,
    is_supported,
    nil_safe_get,
    require_supported,
)
from shared_kernel.markup.rendering import MarkupRenderer, WorkItemLookup

__all__ = [
    "DEFAULT_MARKUP",
    "MARKDOWN",
    "PLAINTEXT",
    "SUPPORTED_MARKUPS",
    "MarkupContent",
    "MarkupRenderer",
    "WorkItemLookup",
    "is_supported",
    "nil_safe_get",
    "require_supported",
]
