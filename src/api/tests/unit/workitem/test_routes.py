"""Unit tests for the work item and render routes."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from account.dependencies import get_current_identity
from comment.ports import ICommentRepository
from infrastructure.dependencies import get_api_base_url, get_cache_control
from shared_kernel.auth import Identity
from shared_kernel.exceptions import (
    ContentionExhaustedError,
    InvalidArgumentError,
    NotFoundError,
)
from shared_kernel.markup import MARKDOWN, MarkupContent, MarkupRenderer
from space.ports import ISpaceRepository
from workitem.application import WorkItemService
from workitem.dependencies import get_markup_renderer, get_work_item_service
from workitem.domain import WorkItem
from workitem.ports import IWorkItemRepository
from workitem.presentation import render_router, router

BASE_URL = "http://api.test"


@pytest.fixture
def identity() -> Identity:
    return Identity(id=uuid.uuid4(), username="alice")


@pytest.fixture
def space_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def work_item(space_id, identity) -> WorkItem:
    return WorkItem(
        space_id=space_id,
        title="Fix login",
        description=MarkupContent("**broken**", MARKDOWN),
        id=uuid.uuid4(),
        number=7,
        created_by=identity.id,
    )


@pytest.fixture
def lookup(work_item) -> AsyncMock:
    repository = AsyncMock(spec=IWorkItemRepository)
    repository.load_by_number.side_effect = lambda s, n: (
        work_item if (s, n) == (work_item.space_id, work_item.number) else None
    )
    return repository


@pytest.fixture
def service(work_item) -> AsyncMock:
    service = AsyncMock(spec=WorkItemService)
    service.create_work_item.return_value = work_item
    service.get_work_item.return_value = work_item
    service.list_work_items.return_value = ([work_item], 1)
    return service


@pytest.fixture
def client(identity, service, lookup) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.include_router(render_router)
    app.dependency_overrides[get_current_identity] = lambda: identity
    app.dependency_overrides[get_work_item_service] = lambda: service
    app.dependency_overrides[get_markup_renderer] = lambda: MarkupRenderer(
        work_items=lookup, api_base_url=BASE_URL
    )
    app.dependency_overrides[get_api_base_url] = lambda: BASE_URL
    app.dependency_overrides[get_cache_control] = lambda: "max-age=300"
    return TestClient(app)


def _create_body(**attributes) -> dict:
    return {"data": {"type": "workitems", "attributes": attributes}}


class TestCreateWorkItem:
    """Tests for POST /api/spaces/{space_id}/workitems."""

    def test_create_work_item(self, client, service, space_id, work_item, identity):
        response = client.post(
            f"/api/spaces/{space_id}/workitems",
            json=_create_body(
                title="Fix login",
                description="**broken**",
                **{"description.markup": MARKDOWN},
            ),
        )

        assert response.status_code == 201
        expected_url = f"{BASE_URL}/api/spaces/{space_id}/workitems/{work_item.id}"
        assert response.headers["Location"] == expected_url
        data = response.json()["data"]
        assert data["attributes"]["number"] == 7
        assert data["attributes"]["description.markup"] == MARKDOWN
        assert "<strong>broken</strong>" in data["attributes"]["description.rendered"]
        assert data["links"]["self"] == expected_url
        assert data["relationships"]["space"]["data"]["id"] == str(space_id)

        kwargs = service.create_work_item.call_args.kwargs
        assert kwargs["space_id"] == space_id
        assert kwargs["creator_id"] == identity.id
        assert kwargs["description"] == MarkupContent("**broken**", MARKDOWN)
        assert kwargs["comment_body"] is None

    def test_create_with_comment(self, client, service, space_id):
        """An attached comment is passed through to the service."""
        response = client.post(
            f"/api/spaces/{space_id}/workitems",
            json=_create_body(
                title="t", comment={"body": "first", "markup": MARKDOWN}
            ),
        )

        assert response.status_code == 201
        kwargs = service.create_work_item.call_args.kwargs
        assert kwargs["comment_body"] == "first"
        assert kwargs["comment_markup"] == MARKDOWN

    def test_create_with_unsupported_markup(self, client, service, space_id):
        service.create_work_item.side_effect = InvalidArgumentError(
            "description.markup", "foo"
        )

        response = client.post(
            f"/api/spaces/{space_id}/workitems",
            json=_create_body(title="t", **{"description.markup": "foo"}),
        )

        assert response.status_code == 400

    def test_create_in_unknown_space(self, client, service, space_id):
        service.create_work_item.side_effect = NotFoundError("space", space_id)

        response = client.post(
            f"/api/spaces/{space_id}/workitems", json=_create_body(title="t")
        )

        assert response.status_code == 404

    def test_contention_is_internal(self, client, service, space_id):
        """Exhausted number allocation surfaces as a server error."""
        service.create_work_item.side_effect = ContentionExhaustedError("busy")

        response = client.post(
            f"/api/spaces/{space_id}/workitems", json=_create_body(title="t")
        )

        assert response.status_code == 500

    def test_create_with_malformed_space_id(self, client, service):
        response = client.post(
            "/api/spaces/nope/workitems", json=_create_body(title="t")
        )

        assert response.status_code == 400
        service.create_work_item.assert_not_awaited()

    def test_create_with_unsupported_comment_markup(self, client, space_id):
        """A first comment in an unknown markup is refused before anything is stored."""
        work_items = AsyncMock(spec=IWorkItemRepository)
        comments = AsyncMock(spec=ICommentRepository)
        real_service = WorkItemService(
            session=MagicMock(),
            space_repository=AsyncMock(spec=ISpaceRepository),
            work_item_repository=work_items,
            comment_repository=comments,
        )
        client.app.dependency_overrides[get_work_item_service] = lambda: real_service

        response = client.post(
            f"/api/spaces/{space_id}/workitems",
            json=_create_body(title="t", comment={"body": "hi", "markup": "foo"}),
        )

        assert response.status_code == 400
        work_items.create.assert_not_awaited()
        comments.create.assert_not_awaited()


class TestReadWorkItems:
    """Tests for listing and getting work items."""

    def test_get_work_item(self, client, space_id, work_item):
        response = client.get(f"/api/spaces/{space_id}/workitems/{work_item.id}")

        assert response.status_code == 200
        assert response.headers["Cache-Control"] == "max-age=300"
        assert response.json()["data"]["attributes"]["title"] == "Fix login"

    def test_get_work_item_not_modified_since(self, client, space_id, work_item):
        work_item.updated_at = datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)
        url = f"/api/spaces/{space_id}/workitems/{work_item.id}"

        fresh = client.get(
            url, headers={"If-Modified-Since": "Sat, 17 Oct 2026 09:00:00 GMT"}
        )
        cached = client.get(
            url, headers={"If-Modified-Since": "Sat, 17 Oct 2026 09:30:00 GMT"}
        )

        assert fresh.status_code == 200
        assert fresh.headers["Last-Modified"] == "Sat, 17 Oct 2026 09:30:00 GMT"
        assert cached.status_code == 304

    def test_get_work_item_matching_etag(self, client, space_id, work_item):
        url = f"/api/spaces/{space_id}/workitems/{work_item.id}"
        etag = client.get(url).headers["ETag"]

        response = client.get(url, headers={"If-None-Match": etag})

        assert response.status_code == 304

    def test_get_work_item_not_found(self, client, service, space_id):
        service.get_work_item.side_effect = NotFoundError("work item", "x")

        response = client.get(f"/api/spaces/{space_id}/workitems/{uuid.uuid4()}")

        assert response.status_code == 404

    def test_get_work_item_malformed_id(self, client, space_id):
        response = client.get(f"/api/spaces/{space_id}/workitems/42")

        assert response.status_code == 400

    def test_list_work_items(self, client, service, space_id, work_item):
        response = client.get(
            f"/api/spaces/{space_id}/workitems?page[offset]=0&page[limit]=5"
        )

        assert response.status_code == 200
        body = response.json()
        assert [d["id"] for d in body["data"]] == [str(work_item.id)]
        assert body["meta"]["totalCount"] == 1
        assert body["links"]["first"] == (
            f"{BASE_URL}/api/spaces/{space_id}/workitems"
            "?page[offset]=0&page[limit]=5"
        )
        service.list_work_items.assert_awaited_once_with(space_id, 0, 5)


class TestRender:
    """Tests for POST /api/render."""

    @staticmethod
    def _render_body(**attributes) -> dict:
        return {"data": {"type": "rendering", "attributes": attributes}}

    def test_render_markdown(self, client):
        response = client.post(
            "/api/render",
            json=self._render_body(content="*hi*", markup=MARKDOWN),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["type"] == "rendering"
        assert data["attributes"]["renderedContent"] == "<p><em>hi</em></p>"

    def test_render_links_references_in_space(self, client, space_id, work_item):
        response = client.post(
            "/api/render",
            json=self._render_body(
                content="see #7", markup=MARKDOWN, space_id=str(space_id)
            ),
        )

        assert response.status_code == 200
        rendered = response.json()["data"]["attributes"]["renderedContent"]
        assert f"/workitems/{work_item.id}" in rendered

    def test_render_unsupported_markup(self, client):
        response = client.post(
            "/api/render", json=self._render_body(content="x", markup="foo")
        )

        assert response.status_code == 400
