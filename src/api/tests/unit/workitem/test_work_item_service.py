"""Tests for WorkItemService over the SQLite-backed stores."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from comment.ports import ICommentRepository
from shared_kernel.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
)
from shared_kernel.markup import MARKDOWN, PLAINTEXT, MarkupContent
from workitem.application import WorkItemService, WorkItemServiceProbe


@pytest.fixture
def probe() -> MagicMock:
    return MagicMock(spec=WorkItemServiceProbe)


@pytest.fixture
def service(
    session, space_repository, work_item_repository, comment_repository, probe
) -> WorkItemService:
    return WorkItemService(
        session=session,
        space_repository=space_repository,
        work_item_repository=work_item_repository,
        comment_repository=comment_repository,
        probe=probe,
    )


class TestCreateWorkItem:
    """Tests for WorkItemService.create_work_item."""

    @pytest.mark.asyncio
    async def test_creates_numbered_work_item(self, service, space, probe):
        creator_id = uuid.uuid4()

        work_item = await service.create_work_item(
            space.id, "Fix login", MarkupContent("broken"), creator_id
        )

        assert work_item.number == 1
        assert work_item.created_by == creator_id
        probe.work_item_created.assert_called_once_with(
            str(work_item.id), str(space.id), 1, with_comment=False
        )

    @pytest.mark.asyncio
    async def test_attaches_first_comment(
        self, service, comment_repository, space, probe
    ):
        """A comment given at creation is stored under the new work item."""
        creator_id = uuid.uuid4()

        work_item = await service.create_work_item(
            space.id,
            "Fix login",
            MarkupContent(""),
            creator_id,
            comment_body="first!",
            comment_markup=MARKDOWN,
        )

        comments, total = await comment_repository.list(str(work_item.id), 0, 10)
        assert total == 1
        assert comments[0].body == "first!"
        assert comments[0].markup == MARKDOWN
        assert comments[0].created_by == creator_id
        assert probe.work_item_created.call_args.kwargs["with_comment"] is True

    @pytest.mark.asyncio
    async def test_attached_comment_defaults_to_plaintext(
        self, service, comment_repository, space
    ):
        work_item = await service.create_work_item(
            space.id, "t", MarkupContent(""), uuid.uuid4(), comment_body="hi"
        )

        comments, _ = await comment_repository.list(str(work_item.id), 0, 10)
        assert comments[0].markup == PLAINTEXT

    @pytest.mark.asyncio
    async def test_unsupported_comment_markup_is_rejected(
        self, service, work_item_repository, number_allocator, space, probe
    ):
        """An attached comment with an unknown markup stores nothing at all."""
        with pytest.raises(InvalidArgumentError):
            await service.create_work_item(
                space.id,
                "t",
                MarkupContent(""),
                uuid.uuid4(),
                comment_body="hi",
                comment_markup="foo",
            )

        assert await work_item_repository.count(space.id) == 0
        assert await number_allocator.current(space.id) == 0
        probe.work_item_creation_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_unknown_space(self, service, probe):
        """Creating in a missing space fails and is reported."""
        space_id = uuid.uuid4()

        with pytest.raises(NotFoundError):
            await service.create_work_item(
                space_id, "t", MarkupContent(""), uuid.uuid4()
            )

        probe.work_item_creation_failed.assert_called_once()
        assert probe.work_item_creation_failed.call_args.args[0] == str(space_id)

    @pytest.mark.asyncio
    async def test_failed_comment_rolls_back_work_item(
        self, session, space_repository, work_item_repository, number_allocator, space
    ):
        """Work item and attached comment are written together or not at all."""
        comment_repository = AsyncMock(spec=ICommentRepository)
        comment_repository.create.side_effect = ConflictError("boom")
        service = WorkItemService(
            session=session,
            space_repository=space_repository,
            work_item_repository=work_item_repository,
            comment_repository=comment_repository,
        )

        with pytest.raises(ConflictError):
            await service.create_work_item(
                space.id, "t", MarkupContent(""), uuid.uuid4(), comment_body="x"
            )

        assert await work_item_repository.count(space.id) == 0
        # the allocated number stays spent
        assert await number_allocator.current(space.id) == 1


class TestReads:
    """Tests for reading work items through the service."""

    @pytest.mark.asyncio
    async def test_get_work_item(self, service, space):
        created = await service.create_work_item(
            space.id, "t", MarkupContent(""), uuid.uuid4()
        )

        found = await service.get_work_item(space.id, created.id)

        assert found.id == created.id

    @pytest.mark.asyncio
    async def test_get_work_item_of_other_space(self, service, space):
        """A work item is not found through a different space."""
        created = await service.create_work_item(
            space.id, "t", MarkupContent(""), uuid.uuid4()
        )

        with pytest.raises(NotFoundError):
            await service.get_work_item(uuid.uuid4(), created.id)

    @pytest.mark.asyncio
    async def test_list_work_items(self, service, space):
        for title in ("a", "b"):
            await service.create_work_item(
                space.id, title, MarkupContent(""), uuid.uuid4()
            )

        items, total = await service.list_work_items(space.id, 0, 10)

        assert total == 2
        assert [w.title for w in items] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_list_work_items_of_unknown_space(self, service):
        with pytest.raises(NotFoundError):
            await service.list_work_items(uuid.uuid4(), 0, 10)
