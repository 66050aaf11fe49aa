"""Work item infrastructure: ORM models, number allocator and repository."""

from workitem.infrastructure.number_allocator import NumberAllocator
from workitem.infrastructure.work_item_repository import WorkItemRepository

__all__ = [
    "NumberAllocator",
    "WorkItemRepository",
]
