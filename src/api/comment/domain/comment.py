"""Comment entity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from shared_kernel.identifiers import NIL_UUID
from shared_kernel.markup import DEFAULT_MARKUP


@dataclass
class Comment:
    """A comment attached to some parent entity.

    ``parent_id`` is an opaque string: work items use their UUID in text form,
    but the store does not require one.
    """

    parent_id: str
    body: str
    markup: str = DEFAULT_MARKUP
    id: UUID = NIL_UUID
    created_by: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_authored_by(self, identity_id: UUID) -> bool:
        """Return True if ``identity_id`` created this comment."""
        return self.created_by is not None and self.created_by == identity_id
