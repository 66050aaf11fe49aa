"""Work item domain."""

from workitem.domain.work_item import WorkItem, WorkItemNumberSequence

__all__ = [
    "WorkItem",
    "WorkItemNumberSequence",
]
