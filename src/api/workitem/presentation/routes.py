"""Work item resource routes and the markup rendering endpoint."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from account.dependencies import get_current_identity
from infrastructure.dependencies import get_api_base_url, get_cache_control
from shared_kernel.auth import Identity
from shared_kernel.conditional import Validators, conditional_get, entity_tag
from shared_kernel.exceptions import WITError
from shared_kernel.markup import MarkupRenderer
from shared_kernel.paging import pagination_links
from shared_kernel.presentation import (
    JSONAPIResponse,
    ListLinks,
    ListMeta,
    abort_with_error,
    get_page,
    parse_uuid,
)
from workitem.application import WorkItemService
from workitem.dependencies import get_markup_renderer, get_work_item_service
from workitem.domain import WorkItem
from workitem.presentation.models import (
    CreateWorkItemRequest,
    RenderedAttributes,
    RenderedResource,
    RenderRequest,
    RenderResponse,
    WorkItemList,
    WorkItemResource,
    WorkItemSingle,
    work_item_url,
)

router = APIRouter(
    prefix="/api/spaces/{space_id}/workitems",
    tags=["workitems"],
    default_response_class=JSONAPIResponse,
)

render_router = APIRouter(
    prefix="/api/render",
    tags=["render"],
    default_response_class=JSONAPIResponse,
)


async def _resource(
    work_item: WorkItem, renderer: MarkupRenderer, api_base_url: str
) -> WorkItemResource:
    rendered = await renderer.render(
        work_item.space_id,
        work_item.description.content,
        work_item.description.markup,
    )
    return WorkItemResource.from_domain(work_item, rendered, api_base_url)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model_exclude_none=True,
    summary="Create a work item",
    description="""
Create a work item in a space. It receives the next number of the space.

An optional `comment` attribute is stored as the work item's first comment.
""",
    responses={
        201: {"description": "Work item created; Location points at it"},
        400: {"description": "Malformed space id or invalid attributes"},
        401: {"description": "Authentication required"},
        404: {"description": "Space not found"},
    },
)
async def create_work_item(
    space_id: str,
    request: CreateWorkItemRequest,
    response: Response,
    identity: Annotated[Identity, Depends(get_current_identity)],
    service: Annotated[WorkItemService, Depends(get_work_item_service)],
    renderer: Annotated[MarkupRenderer, Depends(get_markup_renderer)],
    api_base_url: Annotated[str, Depends(get_api_base_url)],
) -> WorkItemSingle:
    """Create a work item numbered within its space."""
    space_uuid = parse_uuid(space_id, "space ID")
    attributes = request.data.attributes
    try:
        work_item = await service.create_work_item(
            space_id=space_uuid,
            title=attributes.title,
            description=attributes.description_content(),
            creator_id=identity.id,
            comment_body=attributes.comment.body if attributes.comment else None,
            comment_markup=attributes.comment.markup if attributes.comment else None,
        )
        resource = await _resource(work_item, renderer, api_base_url)
    except WITError as e:
        abort_with_error(e, "Failed to create work item")

    response.headers["Location"] = work_item_url(
        api_base_url, work_item.space_id, work_item.id
    )
    return WorkItemSingle(data=resource)


@router.get(
    "",
    response_model_exclude_none=True,
    summary="List the work items of a space",
    responses={
        400: {"description": "Malformed space id"},
        404: {"description": "Space not found"},
    },
)
async def list_work_items(
    space_id: str,
    response: Response,
    page: Annotated[tuple[int, int], Depends(get_page)],
    service: Annotated[WorkItemService, Depends(get_work_item_service)],
    renderer: Annotated[MarkupRenderer, Depends(get_markup_renderer)],
    api_base_url: Annotated[str, Depends(get_api_base_url)],
    cache_control: Annotated[str, Depends(get_cache_control)],
) -> WorkItemList:
    """List work items of a space ordered by number."""
    space_uuid = parse_uuid(space_id, "space ID")
    offset, limit = page
    try:
        work_items, total = await service.list_work_items(space_uuid, offset, limit)
        resources = [await _resource(w, renderer, api_base_url) for w in work_items]
    except WITError as e:
        abort_with_error(e, "Failed to list work items")

    links = pagination_links(
        f"{api_base_url}/api/spaces/{space_uuid}/workitems",
        len(work_items),
        offset,
        limit,
        total,
    )
    response.headers["Cache-Control"] = cache_control
    return WorkItemList(
        data=resources,
        links=ListLinks.from_paging(links),
        meta=ListMeta(total_count=total),
    )


@router.get(
    "/{work_item_id}",
    response_model_exclude_none=True,
    summary="Get a work item",
    responses={
        304: {"description": "Work item unchanged since the cached copy"},
        400: {"description": "Malformed id"},
        404: {"description": "Work item not found in this space"},
    },
)
async def get_work_item(
    space_id: str,
    work_item_id: str,
    request: Request,
    response: Response,
    service: Annotated[WorkItemService, Depends(get_work_item_service)],
    renderer: Annotated[MarkupRenderer, Depends(get_markup_renderer)],
    api_base_url: Annotated[str, Depends(get_api_base_url)],
    cache_control: Annotated[str, Depends(get_cache_control)],
) -> WorkItemSingle:
    """Get a work item of a space by id."""
    space_uuid = parse_uuid(space_id, "space ID")
    work_item_uuid = parse_uuid(work_item_id, "work item ID")
    try:
        work_item = await service.get_work_item(space_uuid, work_item_uuid)
        resource = await _resource(work_item, renderer, api_base_url)
    except WITError as e:
        abort_with_error(e, "Failed to retrieve work item")

    validators = Validators(
        etag=entity_tag(work_item.id, work_item.number, work_item.updated_at),
        last_modified=work_item.updated_at,
    )
    conditional_get(request, response, validators, cache_control)
    return WorkItemSingle(data=resource)


@render_router.post(
    "",
    summary="Render markup content",
    responses={400: {"description": "Unsupported markup or malformed space id"}},
)
async def render_content(
    request: RenderRequest,
    renderer: Annotated[MarkupRenderer, Depends(get_markup_renderer)],
) -> RenderResponse:
    """Render plaintext or markdown content as HTML."""
    attributes = request.data.attributes
    space_uuid = None
    if attributes.space_id:
        space_uuid = parse_uuid(attributes.space_id, "space ID")
    try:
        rendered = await renderer.render(
            space_uuid, attributes.content, attributes.markup
        )
    except WITError as e:
        abort_with_error(e, "Failed to render content")

    return RenderResponse(
        data=RenderedResource(
            id=str(uuid.uuid4()),
            attributes=RenderedAttributes(rendered_content=rendered),
        )
    )
