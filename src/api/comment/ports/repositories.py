"""Repository protocol (port) for comments."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from comment.domain import Comment


@runtime_checkable
class ICommentRepository(Protocol):
    """Store for Comment records.

    Markup handling differs between writes: ``create`` and ``save`` both
    replace an empty tag with plaintext, and neither validates a non-empty
    tag against the supported set.
    """

    async def create(self, comment: Comment, creator_id: UUID) -> Comment:
        """Persist a new comment authored by ``creator_id``.

        A nil id is replaced with a fresh one.

        Raises:
            ConflictError: If the id is already taken
        """
        ...

    async def save(self, comment: Comment, editor_id: UUID) -> Comment:
        """Write the body and markup of an existing comment.

        Changes to id, parent_id, created_by and created_at are ignored.

        Raises:
            NotFoundError: If the comment does not exist
        """
        ...

    async def load(self, comment_id: UUID) -> Comment:
        """Retrieve a comment by id.

        Raises:
            NotFoundError: If the comment does not exist or was deleted
        """
        ...

    async def delete(self, comment_id: UUID, actor_id: UUID) -> None:
        """Delete a comment.

        Raises:
            NotFoundError: If the comment does not exist or was deleted
        """
        ...

    async def list(
        self, parent_id: str, offset: int, limit: int
    ) -> tuple[list[Comment], int]:
        """Return one page of a parent's comments, oldest first, plus the total.

        Raises:
            InvalidArgumentError: If offset < 0 or limit < 1
        """
        ...

    async def count(self, parent_id: str) -> int:
        """Number of comments whose parent is exactly ``parent_id``."""
        ...
