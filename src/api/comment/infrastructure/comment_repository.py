"""SQLAlchemy implementation of ICommentRepository.

Comments are soft-deleted: ``delete`` stamps ``deleted_at`` and every read
filters such rows out, so a deleted comment is indistinguishable from one
that never existed.
"""

from __future__ import annotations

import uuid
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from comment.domain import Comment
from comment.infrastructure.models import CommentModel
from comment.infrastructure.observability import (
    CommentRepositoryProbe,
    DefaultCommentRepositoryProbe,
)
from comment.ports.repositories import ICommentRepository
from infrastructure.database import transaction, translate_store_errors, utc_now
from shared_kernel.exceptions import NotFoundError
from shared_kernel.identifiers import is_nil
from shared_kernel.markup import nil_safe_get
from shared_kernel.paging import check_page_bounds


class CommentRepository(ICommentRepository):
    """Repository for comments backed by the comments table.

    An empty markup tag is stored as plaintext on both create and save.
    Non-empty tags are written as given.
    """

    def __init__(
        self, session: AsyncSession, probe: CommentRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultCommentRepositoryProbe()

    async def create(self, comment: Comment, creator_id: UUID) -> Comment:
        """Persist a new comment authored by ``creator_id``."""
        if is_nil(comment.id):
            comment.id = uuid.uuid4()
        comment.markup = nil_safe_get(comment.markup)
        comment.created_by = creator_id
        now = utc_now()
        comment.created_at = now
        comment.updated_at = now

        with translate_store_errors("create comment"):
            async with transaction(self._session):
                model = CommentModel(
                    id=comment.id,
                    parent_id=comment.parent_id,
                    body=comment.body,
                    markup=comment.markup,
                    created_by=creator_id,
                    created_at=now,
                    updated_at=now,
                )
                self._session.add(model)
                await self._session.flush()
                created = self._to_domain(model)

        self._probe.comment_created(str(created.id), created.parent_id)
        return created

    async def save(self, comment: Comment, editor_id: UUID) -> Comment:
        """Write body and markup of an existing comment.

        id, parent_id, created_by and created_at keep their stored values
        whatever ``comment`` carries.
        """
        with translate_store_errors("save comment"):
            async with transaction(self._session):
                model = await self._get_live_model(comment.id)
                model.body = comment.body
                model.markup = nil_safe_get(comment.markup)
                model.updated_at = utc_now()
                await self._session.flush()
                saved = self._to_domain(model)

        self._probe.comment_saved(str(saved.id))
        return saved

    async def load(self, comment_id: UUID) -> Comment:
        """Retrieve a comment by id."""
        with translate_store_errors("load comment"):
            async with transaction(self._session):
                model = await self._get_live_model(comment_id)
                return self._to_domain(model)

    async def delete(self, comment_id: UUID, actor_id: UUID) -> None:
        """Soft-delete a comment."""
        with translate_store_errors("delete comment"):
            async with transaction(self._session):
                model = await self._get_live_model(comment_id)
                model.deleted_at = utc_now()
                await self._session.flush()

        self._probe.comment_deleted(str(comment_id))

    async def list(
        self, parent_id: str, offset: int, limit: int
    ) -> tuple[list[Comment], int]:
        """Return one page of a parent's comments, oldest first, plus the total."""
        check_page_bounds(offset, limit)
        of_parent = (
            CommentModel.parent_id == parent_id,
            CommentModel.deleted_at.is_(None),
        )
        page_stmt = (
            select(CommentModel)
            .where(*of_parent)
            .order_by(CommentModel.created_at, CommentModel.id)
            .offset(offset)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(CommentModel).where(*of_parent)

        with translate_store_errors("list comments"):
            async with transaction(self._session):
                total = (await self._session.execute(count_stmt)).scalar_one()
                result = await self._session.execute(page_stmt)
                return [self._to_domain(m) for m in result.scalars().all()], total

    async def count(self, parent_id: str) -> int:
        """Number of comments whose parent is exactly ``parent_id``."""
        stmt = (
            select(func.count())
            .select_from(CommentModel)
            .where(
                CommentModel.parent_id == parent_id,
                CommentModel.deleted_at.is_(None),
            )
        )
        with translate_store_errors("count comments"):
            async with transaction(self._session):
                return (await self._session.execute(stmt)).scalar_one()

    async def _get_live_model(self, comment_id: UUID) -> CommentModel:
        stmt = select(CommentModel).where(
            CommentModel.id == comment_id, CommentModel.deleted_at.is_(None)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            self._probe.comment_not_found(str(comment_id))
            raise NotFoundError("comment", comment_id)
        return model

    @staticmethod
    def _to_domain(model: CommentModel) -> Comment:
        return Comment(
            id=model.id,
            parent_id=model.parent_id,
            body=model.body,
            markup=model.markup,
            created_by=model.created_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
