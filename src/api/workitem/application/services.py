"""Work item application service.

Orchestrates work item creation across the space, work item and comment
stores.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from comment.domain import Comment
from comment.ports import ICommentRepository
from infrastructure.database import transaction
from shared_kernel.exceptions import NotFoundError, WITError
from shared_kernel.markup import MarkupContent, require_supported
from space.ports import ISpaceRepository
from workitem.application.observability import (
    DefaultWorkItemServiceProbe,
    WorkItemServiceProbe,
)
from workitem.domain import WorkItem
from workitem.ports import IWorkItemRepository


class WorkItemService:
    """Application service for work items."""

    def __init__(
        self,
        session: AsyncSession,
        space_repository: ISpaceRepository,
        work_item_repository: IWorkItemRepository,
        comment_repository: ICommentRepository,
        probe: WorkItemServiceProbe | None = None,
    ):
        """Initialize WorkItemService with dependencies.

        Args:
            session: Database session for transaction management
            space_repository: Repository used to check the target space
            work_item_repository: Repository for work item persistence
            comment_repository: Repository receiving an attached comment
            probe: Optional domain probe for observability
        """
        self._session = session
        self._space_repository = space_repository
        self._work_item_repository = work_item_repository
        self._comment_repository = comment_repository
        self._probe = probe or DefaultWorkItemServiceProbe()

    async def create_work_item(
        self,
        space_id: UUID,
        title: str,
        description: MarkupContent,
        creator_id: UUID,
        comment_body: str | None = None,
        comment_markup: str | None = None,
    ) -> WorkItem:
        """Create a work item with the next number of its space.

        When ``comment_body`` is given a first comment is written in the same
        transaction as the work item. The number is committed by the
        allocator beforehand, so a failed creation leaves a gap.

        Raises:
            NotFoundError: If the space does not exist
            InvalidArgumentError: If the title, the description markup or the
                comment markup is invalid
            ContentionExhaustedError: If no number could be allocated
        """
        try:
            require_supported(comment_markup)
            await self._space_repository.load(space_id)

            async with transaction(self._session):
                work_item = await self._work_item_repository.create(
                    WorkItem(
                        space_id=space_id,
                        title=title,
                        description=description,
                        created_by=creator_id,
                    )
                )
                if comment_body is not None:
                    await self._comment_repository.create(
                        Comment(
                            parent_id=str(work_item.id),
                            body=comment_body,
                            markup=comment_markup or "",
                        ),
                        creator_id,
                    )
        except WITError as e:
            self._probe.work_item_creation_failed(str(space_id), str(e))
            raise

        self._probe.work_item_created(
            str(work_item.id),
            str(space_id),
            work_item.number,
            with_comment=comment_body is not None,
        )
        return work_item

    async def get_work_item(self, space_id: UUID, work_item_id: UUID) -> WorkItem:
        """Retrieve a work item of the given space.

        Raises:
            NotFoundError: If the work item does not exist in that space
        """
        work_item = await self._work_item_repository.load_by_id(work_item_id)
        if work_item.space_id != space_id:
            raise NotFoundError("work item", work_item_id)
        return work_item

    async def list_work_items(
        self, space_id: UUID, offset: int, limit: int
    ) -> tuple[list[WorkItem], int]:
        """Return one page of the space's work items, plus the total.

        Raises:
            NotFoundError: If the space does not exist
        """
        await self._space_repository.load(space_id)
        return await self._work_item_repository.list(space_id, offset, limit)
