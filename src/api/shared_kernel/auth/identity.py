"""Caller identity value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping
from uuid import UUID


@dataclass(frozen=True)
class Identity:
    """A principal's stable id plus its display username."""

    id: UUID
    username: str

    def __str__(self) -> str:
        """Return string representation."""
        return f"Identity({self.username})"


@dataclass(frozen=True)
class AuthContext:
    """Request-scoped authentication state.

    Built once per request from the ``Authorization`` header. ``claims`` holds
    the verified token claims, or None when the request carried no token.
    """

    claims: Mapping[str, Any] | None = field(default=None)

    @property
    def has_token(self) -> bool:
        """Whether a verified token is attached."""
        return self.claims is not None

    @classmethod
    def anonymous(cls) -> AuthContext:
        """Context for a request without a bearer token."""
        return cls(claims=None)
