"""User aggregate for the account context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from shared_kernel.identifiers import NIL_UUID


@dataclass
class User:
    """A person known to the service.

    A user owns zero or more identities, one per external identity provider.
    ``context_information`` is an opaque JSON document; keys the service does
    not know about are preserved as-is.
    """

    email: str
    id: UUID = NIL_UUID
    full_name: str = ""
    image_url: str = ""
    bio: str = ""
    url: str = ""
    context_information: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.email})"
