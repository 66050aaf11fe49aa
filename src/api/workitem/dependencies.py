"""FastAPI dependency injection for the work item context.

Provides the number allocator, work item repository and service, and the
markup renderer (which resolves ``#<number>`` references to work items).
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from comment.infrastructure import CommentRepository
from infrastructure.database.dependencies import (
    get_write_session,
    get_write_sessionmaker,
)
from infrastructure.dependencies import get_api_base_url
from infrastructure.settings import Settings, get_settings
from shared_kernel.markup import MarkupRenderer
from space.dependencies import get_space_repository
from space.infrastructure import SpaceRepository
from workitem.application import (
    DefaultWorkItemServiceProbe,
    WorkItemService,
    WorkItemServiceProbe,
)
from workitem.infrastructure import NumberAllocator, WorkItemRepository
from workitem.infrastructure.observability import (
    DefaultNumberAllocatorProbe,
    DefaultWorkItemRepositoryProbe,
    NumberAllocatorProbe,
    WorkItemRepositoryProbe,
)


def get_number_allocator_probe() -> NumberAllocatorProbe:
    """Get NumberAllocatorProbe instance."""
    return DefaultNumberAllocatorProbe()


def get_work_item_repository_probe() -> WorkItemRepositoryProbe:
    """Get WorkItemRepositoryProbe instance."""
    return DefaultWorkItemRepositoryProbe()


def get_work_item_service_probe() -> WorkItemServiceProbe:
    """Get WorkItemServiceProbe instance."""
    return DefaultWorkItemServiceProbe()


def get_number_allocator(
    sessionmaker: Annotated[
        async_sessionmaker[AsyncSession], Depends(get_write_sessionmaker)
    ],
    settings: Annotated[Settings, Depends(get_settings)],
    probe: Annotated[NumberAllocatorProbe, Depends(get_number_allocator_probe)],
) -> NumberAllocator:
    """Get NumberAllocator instance.

    The allocator opens its own sessions from the write sessionmaker rather
    than using the request session.
    """
    return NumberAllocator(
        sessionmaker,
        max_attempts=settings.number_allocation_max_attempts,
        probe=probe,
    )


def get_work_item_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    allocator: Annotated[NumberAllocator, Depends(get_number_allocator)],
    probe: Annotated[WorkItemRepositoryProbe, Depends(get_work_item_repository_probe)],
) -> WorkItemRepository:
    """Get WorkItemRepository instance."""
    return WorkItemRepository(session=session, number_allocator=allocator, probe=probe)


def get_comment_repository_for_work_item(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> CommentRepository:
    """Get CommentRepository instance for comments attached on creation."""
    return CommentRepository(session=session)


def get_work_item_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    space_repo: Annotated[SpaceRepository, Depends(get_space_repository)],
    work_item_repo: Annotated[WorkItemRepository, Depends(get_work_item_repository)],
    comment_repo: Annotated[
        CommentRepository, Depends(get_comment_repository_for_work_item)
    ],
    probe: Annotated[WorkItemServiceProbe, Depends(get_work_item_service_probe)],
) -> WorkItemService:
    """Get WorkItemService instance.

    Args:
        session: Database session shared by the repositories
        space_repo: Space repository
        work_item_repo: Work item repository
        comment_repo: Comment repository
        probe: Work item service probe for observability
    """
    return WorkItemService(
        session=session,
        space_repository=space_repo,
        work_item_repository=work_item_repo,
        comment_repository=comment_repo,
        probe=probe,
    )


def get_markup_renderer(
    work_item_repo: Annotated[WorkItemRepository, Depends(get_work_item_repository)],
    api_base_url: Annotated[str, Depends(get_api_base_url)],
) -> MarkupRenderer:
    """Get MarkupRenderer instance linking references to work items."""
    return MarkupRenderer(work_items=work_item_repo, api_base_url=api_base_url)
