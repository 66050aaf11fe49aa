"""Space resource routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from account.dependencies import get_current_identity
from infrastructure.dependencies import get_api_base_url, get_cache_control
from shared_kernel.auth import Identity
from shared_kernel.conditional import Validators, conditional_get, entity_tag
from shared_kernel.exceptions import WITError
from shared_kernel.paging import pagination_links
from shared_kernel.presentation import (
    JSONAPIResponse,
    ListLinks,
    ListMeta,
    abort_with_error,
    get_page,
    parse_uuid,
)
from space.dependencies import get_space_repository
from space.domain import Space
from space.infrastructure import SpaceRepository
from space.ports import IWorkItemCounter
from space.presentation.models import (
    CreateSpaceRequest,
    SpaceList,
    SpaceResource,
    SpaceSingle,
    space_url,
)
from workitem.dependencies import get_work_item_repository
from workitem.infrastructure import WorkItemRepository

router = APIRouter(
    prefix="/api/spaces",
    tags=["spaces"],
    default_response_class=JSONAPIResponse,
)


async def _resource(
    space: Space, counter: IWorkItemCounter, api_base_url: str
) -> SpaceResource:
    count = await counter.count(space.id)
    return SpaceResource.from_domain(space, api_base_url, count)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model_exclude_none=True,
    summary="Create a space",
    responses={
        201: {"description": "Space created; Location points at it"},
        400: {"description": "Invalid space attributes"},
        401: {"description": "Authentication required"},
        409: {"description": "Space id already taken"},
    },
)
async def create_space(
    request: CreateSpaceRequest,
    response: Response,
    identity: Annotated[Identity, Depends(get_current_identity)],
    repository: Annotated[SpaceRepository, Depends(get_space_repository)],
    api_base_url: Annotated[str, Depends(get_api_base_url)],
) -> SpaceSingle:
    """Create a space owned by the caller."""
    attributes = request.data.attributes
    try:
        space = await repository.create(
            Space(
                name=attributes.name,
                description=attributes.description,
                owner_id=identity.id,
            )
        )
    except WITError as e:
        abort_with_error(e, "Failed to create space")

    response.headers["Location"] = space_url(api_base_url, str(space.id))
    return SpaceSingle(data=SpaceResource.from_domain(space, api_base_url, 0))


@router.get(
    "",
    response_model_exclude_none=True,
    summary="List spaces",
    responses={400: {"description": "Invalid paging parameters"}},
)
async def list_spaces(
    response: Response,
    page: Annotated[tuple[int, int], Depends(get_page)],
    repository: Annotated[SpaceRepository, Depends(get_space_repository)],
    counter: Annotated[WorkItemRepository, Depends(get_work_item_repository)],
    api_base_url: Annotated[str, Depends(get_api_base_url)],
    cache_control: Annotated[str, Depends(get_cache_control)],
) -> SpaceList:
    """List spaces ordered by creation time."""
    offset, limit = page
    try:
        spaces, total = await repository.list(offset, limit)
        resources = [await _resource(s, counter, api_base_url) for s in spaces]
    except WITError as e:
        abort_with_error(e, "Failed to list spaces")

    links = pagination_links(
        f"{api_base_url}/api/spaces", len(spaces), offset, limit, total
    )
    response.headers["Cache-Control"] = cache_control
    return SpaceList(
        data=resources,
        links=ListLinks.from_paging(links),
        meta=ListMeta(total_count=total),
    )


@router.get(
    "/{space_id}",
    response_model_exclude_none=True,
    summary="Get a space",
    responses={
        304: {"description": "Space unchanged since the cached copy"},
        400: {"description": "Malformed space id"},
        404: {"description": "Space not found"},
    },
)
async def get_space(
    space_id: str,
    request: Request,
    response: Response,
    repository: Annotated[SpaceRepository, Depends(get_space_repository)],
    counter: Annotated[WorkItemRepository, Depends(get_work_item_repository)],
    api_base_url: Annotated[str, Depends(get_api_base_url)],
    cache_control: Annotated[str, Depends(get_cache_control)],
) -> SpaceSingle:
    """Get a space by id."""
    space_uuid = parse_uuid(space_id, "space ID")
    try:
        space = await repository.load(space_uuid)
        count = await counter.count(space.id)
    except WITError as e:
        abort_with_error(e, "Failed to retrieve space")

    validators = Validators(
        etag=entity_tag(space.id, space.version, space.updated_at, count),
        last_modified=space.updated_at,
    )
    conditional_get(request, response, validators, cache_control)
    return SpaceSingle(data=SpaceResource.from_domain(space, api_base_url, count))
