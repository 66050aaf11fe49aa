"""SQLAlchemy implementation of IWorkItemRepository."""

from __future__ import annotations

import uuid
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database import transaction, translate_store_errors, utc_now
from shared_kernel.exceptions import InvalidArgumentError, NotFoundError
from shared_kernel.markup import MarkupContent, is_supported
from shared_kernel.paging import check_page_bounds
from workitem.domain import WorkItem
from workitem.infrastructure.models import WorkItemModel
from workitem.infrastructure.observability import (
    DefaultWorkItemRepositoryProbe,
    WorkItemRepositoryProbe,
)
from workitem.ports.repositories import INumberAllocator, IWorkItemRepository


class WorkItemRepository(IWorkItemRepository):
    """Repository for WorkItem aggregates backed by the work_items table.

    Numbers come from the allocator, which commits them in its own
    transaction before the work item row is written.
    """

    def __init__(
        self,
        session: AsyncSession,
        number_allocator: INumberAllocator,
        probe: WorkItemRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository.

        Args:
            session: AsyncSession from FastAPI dependency injection
            number_allocator: Source of per-space work item numbers
            probe: Optional domain probe for observability
        """
        self._session = session
        self._number_allocator = number_allocator
        self._probe = probe or DefaultWorkItemRepositoryProbe()

    async def create(self, work_item: WorkItem) -> WorkItem:
        """Allocate the next number of the space and persist the work item."""
        if not work_item.title or not work_item.title.strip():
            raise InvalidArgumentError("title", work_item.title, "must not be empty")
        if not is_supported(work_item.description.markup):
            raise InvalidArgumentError(
                "description.markup",
                work_item.description.markup,
                "unsupported markup",
            )

        # allocated before this session issues any statement
        number = await self._number_allocator.next_val(work_item.space_id)
        now = utc_now()

        with translate_store_errors("create work item"):
            async with transaction(self._session):
                model = WorkItemModel(
                    id=uuid.uuid4(),
                    space_id=work_item.space_id,
                    number=number,
                    title=work_item.title,
                    description=work_item.description.to_mapping(),
                    created_by=work_item.created_by,
                    created_at=now,
                    updated_at=now,
                )
                self._session.add(model)
                await self._session.flush()
                created = self._to_domain(model)

        self._probe.work_item_created(
            str(created.id), str(created.space_id), created.number
        )
        return created

    async def load_by_id(self, work_item_id: UUID) -> WorkItem:
        """Retrieve a work item by id."""
        stmt = select(WorkItemModel).where(
            WorkItemModel.id == work_item_id, WorkItemModel.deleted_at.is_(None)
        )
        with translate_store_errors("load work item"):
            async with transaction(self._session):
                model = (await self._session.execute(stmt)).scalar_one_or_none()
                if model is None:
                    self._probe.work_item_not_found(str(work_item_id))
                    raise NotFoundError("work item", work_item_id)
                return self._to_domain(model)

    async def load_by_number(self, space_id: UUID, number: int) -> WorkItem | None:
        """Retrieve a work item by its number within a space, or None."""
        stmt = select(WorkItemModel).where(
            WorkItemModel.space_id == space_id,
            WorkItemModel.number == number,
            WorkItemModel.deleted_at.is_(None),
        )
        with translate_store_errors("load work item by number"):
            async with transaction(self._session):
                model = (await self._session.execute(stmt)).scalar_one_or_none()
                return None if model is None else self._to_domain(model)

    async def list(
        self, space_id: UUID, offset: int, limit: int
    ) -> tuple[list[WorkItem], int]:
        """Return one page of the space's work items by number, plus the total."""
        check_page_bounds(offset, limit)
        in_space = (
            WorkItemModel.space_id == space_id,
            WorkItemModel.deleted_at.is_(None),
        )
        page_stmt = (
            select(WorkItemModel)
            .where(*in_space)
            .order_by(WorkItemModel.number)
            .offset(offset)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(WorkItemModel).where(*in_space)

        with translate_store_errors("list work items"):
            async with transaction(self._session):
                total = (await self._session.execute(count_stmt)).scalar_one()
                result = await self._session.execute(page_stmt)
                return [self._to_domain(m) for m in result.scalars().all()], total

    async def count(self, space_id: UUID) -> int:
        """Number of work items in the space."""
        stmt = (
            select(func.count())
            .select_from(WorkItemModel)
            .where(
                WorkItemModel.space_id == space_id,
                WorkItemModel.deleted_at.is_(None),
            )
        )
        with translate_store_errors("count work items"):
            async with transaction(self._session):
                return (await self._session.execute(stmt)).scalar_one()

    @staticmethod
    def _to_domain(model: WorkItemModel) -> WorkItem:
        return WorkItem(
            id=model.id,
            space_id=model.space_id,
            number=model.number,
            title=model.title,
            description=MarkupContent.from_mapping(model.description),
            created_by=model.created_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
