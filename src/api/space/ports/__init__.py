"""Ports for the space context."""

from space.ports.repositories import ISpaceRepository, IWorkItemCounter

__all__ = [
    "ISpaceRepository",
    "IWorkItemCounter",
]
