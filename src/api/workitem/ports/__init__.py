"""Ports for the work item context."""

from workitem.ports.repositories import INumberAllocator, IWorkItemRepository

__all__ = [
    "INumberAllocator",
    "IWorkItemRepository",
]
