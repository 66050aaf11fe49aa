"""FastAPI dependency injection for the comment context."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from comment.application import (
    CommentService,
    CommentServiceProbe,
    DefaultCommentServiceProbe,
)
from comment.infrastructure import CommentRepository
from comment.infrastructure.observability import (
    CommentRepositoryProbe,
    DefaultCommentRepositoryProbe,
)
from infrastructure.database.dependencies import get_write_session
from workitem.dependencies import get_work_item_repository
from workitem.infrastructure import WorkItemRepository


def get_comment_repository_probe() -> CommentRepositoryProbe:
    """Get CommentRepositoryProbe instance."""
    return DefaultCommentRepositoryProbe()


def get_comment_service_probe() -> CommentServiceProbe:
    """Get CommentServiceProbe instance."""
    return DefaultCommentServiceProbe()


def get_comment_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[CommentRepositoryProbe, Depends(get_comment_repository_probe)],
) -> CommentRepository:
    """Get CommentRepository instance."""
    return CommentRepository(session=session, probe=probe)


def get_comment_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    comment_repo: Annotated[CommentRepository, Depends(get_comment_repository)],
    work_item_repo: Annotated[WorkItemRepository, Depends(get_work_item_repository)],
    probe: Annotated[CommentServiceProbe, Depends(get_comment_service_probe)],
) -> CommentService:
    """Get CommentService instance."""
    return CommentService(
        session=session,
        comment_repository=comment_repo,
        work_item_repository=work_item_repo,
        probe=probe,
    )
