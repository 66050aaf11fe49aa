"""Work item aggregate and its per-space number sequence."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from shared_kernel.identifiers import NIL_UUID
from shared_kernel.markup import MarkupContent


@dataclass
class WorkItem:
    """A unit of work tracked inside a space.

    ``number`` is the human-visible per-space number (e.g. "#42"). It is
    assigned by the number allocator when the work item is created.
    """

    space_id: UUID
    title: str
    description: MarkupContent = field(default_factory=lambda: MarkupContent(""))
    id: UUID = NIL_UUID
    number: int = 0
    created_by: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __str__(self) -> str:
        """Return string representation."""
        return f"WorkItem(#{self.number} {self.title})"


@dataclass(frozen=True)
class WorkItemNumberSequence:
    """High-water mark of the work item numbers handed out in a space."""

    id: UUID
    space_id: UUID
    current_val: int

    def __str__(self) -> str:
        """Return string representation."""
        return f"SpaceId={self.space_id} Number={self.current_val}"
