"""Fixtures for work item store and service tests."""

from __future__ import annotations

import uuid

import pytest
import pytest_asyncio

from comment.infrastructure import CommentRepository
from space.domain import Space
from space.infrastructure import SpaceRepository
from workitem.infrastructure import NumberAllocator, WorkItemRepository


@pytest.fixture
def space_repository(session) -> SpaceRepository:
    return SpaceRepository(session=session)


@pytest.fixture
def number_allocator(sessionmaker) -> NumberAllocator:
    return NumberAllocator(sessionmaker, retry_delay=0)


@pytest.fixture
def work_item_repository(session, number_allocator) -> WorkItemRepository:
    return WorkItemRepository(session=session, number_allocator=number_allocator)


@pytest.fixture
def comment_repository(session) -> CommentRepository:
    return CommentRepository(session=session)


@pytest_asyncio.fixture
async def space(space_repository) -> Space:
    return await space_repository.create(
        Space(name="Platform", owner_id=uuid.uuid4())
    )
