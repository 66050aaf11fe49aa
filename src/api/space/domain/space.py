"""Space aggregate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from shared_kernel.identifiers import NIL_UUID


@dataclass
class Space:
    """A project scope that owns its own work item numbering."""

    name: str
    id: UUID = NIL_UUID
    description: str = ""
    owner_id: UUID | None = None
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __str__(self) -> str:
        """Return string representation."""
        return f"Space({self.name})"
