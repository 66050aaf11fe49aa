"""Space infrastructure: ORM model and repository."""

from space.infrastructure.space_repository import SpaceRepository

__all__ = ["SpaceRepository"]
