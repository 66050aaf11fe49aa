"""Work item application layer."""

from workitem.application.observability import (
    DefaultWorkItemServiceProbe,
    WorkItemServiceProbe,
)
from workitem.application.services import WorkItemService

__all__ = [
    "DefaultWorkItemServiceProbe",
    "WorkItemService",
    "WorkItemServiceProbe",
]
