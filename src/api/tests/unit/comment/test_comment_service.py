"""Unit tests for CommentService with mocked repositories."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from comment.application import CommentService, CommentServiceProbe
from comment.domain import Comment
from comment.ports import ICommentRepository
from shared_kernel.exceptions import (
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)
from shared_kernel.markup import MARKDOWN
from workitem.domain import WorkItem
from workitem.ports import IWorkItemRepository


@pytest.fixture
def author_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def work_item() -> WorkItem:
    return WorkItem(space_id=uuid.uuid4(), title="t", id=uuid.uuid4(), number=1)


@pytest.fixture
def comment(work_item, author_id) -> Comment:
    return Comment(
        parent_id=str(work_item.id),
        body="original",
        id=uuid.uuid4(),
        created_by=author_id,
    )


@pytest.fixture
def comment_repository(comment) -> AsyncMock:
    repository = AsyncMock(spec=ICommentRepository)
    repository.load.return_value = comment
    repository.save.side_effect = lambda c, editor_id: c
    repository.create.side_effect = lambda c, creator_id: c
    return repository


@pytest.fixture
def work_item_repository(work_item) -> AsyncMock:
    repository = AsyncMock(spec=IWorkItemRepository)
    repository.load_by_id.return_value = work_item
    return repository


@pytest.fixture
def probe() -> MagicMock:
    return MagicMock(spec=CommentServiceProbe)


@pytest.fixture
def service(session, comment_repository, work_item_repository, probe):
    return CommentService(
        session=session,
        comment_repository=comment_repository,
        work_item_repository=work_item_repository,
        probe=probe,
    )


class TestCreateAndList:
    """Tests for commenting on work items."""

    @pytest.mark.asyncio
    async def test_create_for_work_item(
        self, service, comment_repository, work_item, author_id
    ):
        comment, space_id = await service.create_for_work_item(
            work_item.id, "hello", MARKDOWN, author_id
        )

        assert space_id == work_item.space_id
        assert comment.parent_id == str(work_item.id)
        comment_repository.create.assert_awaited_once()
        assert comment_repository.create.call_args.args[1] == author_id

    @pytest.mark.asyncio
    async def test_create_with_unsupported_markup(
        self, service, comment_repository, work_item, author_id
    ):
        with pytest.raises(InvalidArgumentError):
            await service.create_for_work_item(work_item.id, "x", "foo", author_id)

        comment_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_without_markup_passes_empty_tag(
        self, service, comment_repository, work_item, author_id
    ):
        """The store decides the default markup."""
        await service.create_for_work_item(work_item.id, "x", None, author_id)

        assert comment_repository.create.call_args.args[0].markup == ""

    @pytest.mark.asyncio
    async def test_create_on_unknown_work_item(
        self, service, work_item_repository, comment_repository, author_id
    ):
        work_item_repository.load_by_id.side_effect = NotFoundError("work item", "x")

        with pytest.raises(NotFoundError):
            await service.create_for_work_item(uuid.uuid4(), "x", None, author_id)

        comment_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_for_work_item(
        self, service, comment_repository, work_item, comment
    ):
        comment_repository.list.return_value = ([comment], 1)

        comments, total, space_id = await service.list_for_work_item(
            work_item.id, 0, 20
        )

        assert comments == [comment]
        assert total == 1
        assert space_id == work_item.space_id
        comment_repository.list.assert_awaited_once_with(str(work_item.id), 0, 20)


class TestAuthorOnly:
    """Only the author may change or delete a comment."""

    @pytest.mark.asyncio
    async def test_author_updates_body(self, service, comment, author_id):
        updated = await service.update(comment.id, author_id, body="edited")

        assert updated.body == "edited"

    @pytest.mark.asyncio
    async def test_update_keeps_unspecified_fields(self, service, comment, author_id):
        """Only the given attributes change."""
        updated = await service.update(comment.id, author_id, markup=MARKDOWN)

        assert updated.body == "original"
        assert updated.markup == MARKDOWN

    @pytest.mark.asyncio
    async def test_other_identity_cannot_update(
        self, service, comment_repository, comment, probe
    ):
        intruder = uuid.uuid4()

        with pytest.raises(ForbiddenError):
            await service.update(comment.id, intruder, body="hacked")

        comment_repository.save.assert_not_awaited()
        probe.comment_access_denied.assert_called_once_with(
            str(comment.id), str(intruder), "update"
        )

    @pytest.mark.asyncio
    async def test_author_deletes(
        self, service, comment_repository, comment, author_id
    ):
        await service.delete(comment.id, author_id)

        comment_repository.delete.assert_awaited_once_with(comment.id, author_id)

    @pytest.mark.asyncio
    async def test_other_identity_cannot_delete(
        self, service, comment_repository, comment
    ):
        with pytest.raises(ForbiddenError):
            await service.delete(comment.id, uuid.uuid4())

        comment_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_with_unsupported_markup(self, service, comment, author_id):
        with pytest.raises(InvalidArgumentError):
            await service.update(comment.id, author_id, markup="foo")


class TestParentSpaceId:
    """Tests for resolving a comment's space."""

    @pytest.mark.asyncio
    async def test_parent_is_work_item(self, service, comment, work_item):
        assert await service.parent_space_id(comment) == work_item.space_id

    @pytest.mark.asyncio
    async def test_parent_is_not_a_uuid(self, service, work_item_repository):
        comment = Comment(parent_id="A", body="x")

        assert await service.parent_space_id(comment) is None
        work_item_repository.load_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_parent_work_item_is_gone(
        self, service, work_item_repository, comment
    ):
        work_item_repository.load_by_id.side_effect = NotFoundError("work item", "x")

        assert await service.parent_space_id(comment) is None
