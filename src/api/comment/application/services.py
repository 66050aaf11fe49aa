"""Comment application service.

Comments reached through the HTTP API hang off work items; only their author
may change or delete them.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from comment.application.observability import (
    CommentServiceProbe,
    DefaultCommentServiceProbe,
)
from comment.domain import Comment
from comment.ports import ICommentRepository
from infrastructure.database import transaction
from shared_kernel.exceptions import ForbiddenError, NotFoundError
from shared_kernel.markup import require_supported
from workitem.ports import IWorkItemRepository


class CommentService:
    """Application service for comments on work items."""

    def __init__(
        self,
        session: AsyncSession,
        comment_repository: ICommentRepository,
        work_item_repository: IWorkItemRepository,
        probe: CommentServiceProbe | None = None,
    ):
        """Initialize CommentService with dependencies.

        Args:
            session: Database session for transaction management
            comment_repository: Repository for comment persistence
            work_item_repository: Repository used to resolve comment parents
            probe: Optional domain probe for observability
        """
        self._session = session
        self._comment_repository = comment_repository
        self._work_item_repository = work_item_repository
        self._probe = probe or DefaultCommentServiceProbe()

    async def list_for_work_item(
        self, work_item_id: UUID, offset: int, limit: int
    ) -> tuple[list[Comment], int, UUID]:
        """Return one page of a work item's comments, the total and its space.

        Raises:
            NotFoundError: If the work item does not exist
        """
        async with transaction(self._session):
            work_item = await self._work_item_repository.load_by_id(work_item_id)
            comments, total = await self._comment_repository.list(
                str(work_item_id), offset, limit
            )
        return comments, total, work_item.space_id

    async def create_for_work_item(
        self,
        work_item_id: UUID,
        body: str,
        markup: str | None,
        creator_id: UUID,
    ) -> tuple[Comment, UUID]:
        """Comment on a work item; returns the comment and the work item's space.

        Raises:
            NotFoundError: If the work item does not exist
            InvalidArgumentError: If ``markup`` is given but not supported
        """
        require_supported(markup)
        async with transaction(self._session):
            work_item = await self._work_item_repository.load_by_id(work_item_id)
            comment = await self._comment_repository.create(
                Comment(parent_id=str(work_item_id), body=body, markup=markup or ""),
                creator_id,
            )
        return comment, work_item.space_id

    async def get(self, comment_id: UUID) -> Comment:
        """Retrieve a comment.

        Raises:
            NotFoundError: If the comment does not exist
        """
        return await self._comment_repository.load(comment_id)

    async def update(
        self,
        comment_id: UUID,
        editor_id: UUID,
        body: str | None = None,
        markup: str | None = None,
    ) -> Comment:
        """Change body and/or markup of a comment written by ``editor_id``.

        Raises:
            NotFoundError: If the comment does not exist
            ForbiddenError: If ``editor_id`` is not the author
            InvalidArgumentError: If ``markup`` is given but not supported
        """
        require_supported(markup)
        async with transaction(self._session):
            comment = await self._comment_repository.load(comment_id)
            self._require_author(comment, editor_id, "update")
            if body is not None:
                comment.body = body
            if markup is not None:
                comment.markup = markup
            return await self._comment_repository.save(comment, editor_id)

    async def delete(self, comment_id: UUID, actor_id: UUID) -> None:
        """Delete a comment written by ``actor_id``.

        Raises:
            NotFoundError: If the comment does not exist
            ForbiddenError: If ``actor_id`` is not the author
        """
        async with transaction(self._session):
            comment = await self._comment_repository.load(comment_id)
            self._require_author(comment, actor_id, "delete")
            await self._comment_repository.delete(comment_id, actor_id)

    async def parent_space_id(self, comment: Comment) -> UUID | None:
        """Space of the work item a comment belongs to, if there is one."""
        try:
            work_item_id = UUID(comment.parent_id)
        except ValueError:
            return None
        try:
            work_item = await self._work_item_repository.load_by_id(work_item_id)
        except NotFoundError:
            return None
        return work_item.space_id

    def _require_author(self, comment: Comment, identity_id: UUID, action: str) -> None:
        if not comment.is_authored_by(identity_id):
            self._probe.comment_access_denied(str(comment.id), str(identity_id), action)
            raise ForbiddenError(
                f"Only the author may {action} comment {comment.id}"
            )
