"""Comment resource routes.

Comments are listed and created under their work item and addressed
individually under ``/api/comments``. Only the author may change or delete
a comment.
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status

from account.dependencies import get_current_identity, get_current_identity_id
from comment.application import CommentService
from comment.dependencies import get_comment_service
from comment.domain import Comment
from comment.presentation.models import (
    CommentList,
    CommentResource,
    CommentSingle,
    CreateCommentRequest,
    UpdateCommentRequest,
    comment_url,
)
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
from workitem.dependencies import get_markup_renderer

router = APIRouter(
    prefix="/api",
    tags=["comments"],
    default_response_class=JSONAPIResponse,
)


async def _resource(
    comment: Comment,
    space_id: UUID | None,
    renderer: MarkupRenderer,
    api_base_url: str,
) -> CommentResource:
    rendered = await renderer.render(space_id, comment.body, comment.markup)
    return CommentResource.from_domain(comment, rendered, api_base_url)


@router.get(
    "/workitems/{work_item_id}/comments",
    response_model_exclude_none=True,
    summary="List the comments of a work item",
    responses={
        400: {"description": "Malformed work item id"},
        404: {"description": "Work item not found"},
    },
)
async def list_comments(
    work_item_id: str,
    response: Response,
    page: Annotated[tuple[int, int], Depends(get_page)],
    service: Annotated[CommentService, Depends(get_comment_service)],
    renderer: Annotated[MarkupRenderer, Depends(get_markup_renderer)],
    api_base_url: Annotated[str, Depends(get_api_base_url)],
    cache_control: Annotated[str, Depends(get_cache_control)],
) -> CommentList:
    """List comments of a work item, oldest first."""
    work_item_uuid = parse_uuid(work_item_id, "work item ID")
    offset, limit = page
    try:
        comments, total, space_id = await service.list_for_work_item(
            work_item_uuid, offset, limit
        )
        resources = [
            await _resource(c, space_id, renderer, api_base_url) for c in comments
        ]
    except WITError as e:
        abort_with_error(e, "Failed to list comments")

    links = pagination_links(
        f"{api_base_url}/api/workitems/{work_item_uuid}/comments",
        len(comments),
        offset,
        limit,
        total,
    )
    response.headers["Cache-Control"] = cache_control
    return CommentList(
        data=resources,
        links=ListLinks.from_paging(links),
        meta=ListMeta(total_count=total),
    )


@router.post(
    "/workitems/{work_item_id}/comments",
    status_code=status.HTTP_201_CREATED,
    response_model_exclude_none=True,
    summary="Comment on a work item",
    responses={
        201: {"description": "Comment created; Location points at it"},
        400: {"description": "Malformed id or unsupported markup"},
        401: {"description": "Authentication required"},
        404: {"description": "Work item not found"},
    },
)
async def create_comment(
    work_item_id: str,
    request: CreateCommentRequest,
    response: Response,
    identity: Annotated[Identity, Depends(get_current_identity)],
    service: Annotated[CommentService, Depends(get_comment_service)],
    renderer: Annotated[MarkupRenderer, Depends(get_markup_renderer)],
    api_base_url: Annotated[str, Depends(get_api_base_url)],
) -> CommentSingle:
    """Add a comment authored by the caller to a work item."""
    work_item_uuid = parse_uuid(work_item_id, "work item ID")
    attributes = request.data.attributes
    try:
        comment, space_id = await service.create_for_work_item(
            work_item_uuid, attributes.body, attributes.markup, identity.id
        )
        resource = await _resource(comment, space_id, renderer, api_base_url)
    except WITError as e:
        abort_with_error(e, "Failed to create comment")

    response.headers["Location"] = comment_url(api_base_url, comment.id)
    return CommentSingle(data=resource)


@router.get(
    "/comments/{comment_id}",
    response_model_exclude_none=True,
    summary="Get a comment",
    responses={
        304: {"description": "Comment unchanged since the cached copy"},
        400: {"description": "Malformed comment id"},
        404: {"description": "Comment not found"},
    },
)
async def get_comment(
    comment_id: str,
    request: Request,
    response: Response,
    service: Annotated[CommentService, Depends(get_comment_service)],
    renderer: Annotated[MarkupRenderer, Depends(get_markup_renderer)],
    api_base_url: Annotated[str, Depends(get_api_base_url)],
    cache_control: Annotated[str, Depends(get_cache_control)],
) -> CommentSingle:
    """Get a comment by id."""
    comment_uuid = parse_uuid(comment_id, "comment ID")
    try:
        comment = await service.get(comment_uuid)
        space_id = await service.parent_space_id(comment)
        resource = await _resource(comment, space_id, renderer, api_base_url)
    except WITError as e:
        abort_with_error(e, "Failed to retrieve comment")

    validators = Validators(
        etag=entity_tag(comment.id, comment.markup, comment.updated_at),
        last_modified=comment.updated_at,
    )
    conditional_get(request, response, validators, cache_control)
    return CommentSingle(data=resource)


@router.patch(
    "/comments/{comment_id}",
    response_model_exclude_none=True,
    summary="Update a comment",
    responses={
        400: {"description": "Malformed id or unsupported markup"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not the author"},
        404: {"description": "Comment not found"},
    },
)
async def update_comment(
    comment_id: str,
    request: UpdateCommentRequest,
    identity_id: Annotated[UUID, Depends(get_current_identity_id)],
    service: Annotated[CommentService, Depends(get_comment_service)],
    renderer: Annotated[MarkupRenderer, Depends(get_markup_renderer)],
    api_base_url: Annotated[str, Depends(get_api_base_url)],
) -> CommentSingle:
    """Change body and/or markup of the caller's comment."""
    comment_uuid = parse_uuid(comment_id, "comment ID")
    attributes = request.data.attributes
    try:
        comment = await service.update(
            comment_uuid,
            identity_id,
            body=attributes.body,
            markup=attributes.markup,
        )
        space_id = await service.parent_space_id(comment)
        resource = await _resource(comment, space_id, renderer, api_base_url)
    except WITError as e:
        abort_with_error(e, "Failed to update comment")

    return CommentSingle(data=resource)


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    responses={
        204: {"description": "Comment deleted"},
        400: {"description": "Malformed comment id"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not the author"},
        404: {"description": "Comment not found"},
    },
)
async def delete_comment(
    comment_id: str,
    identity_id: Annotated[UUID, Depends(get_current_identity_id)],
    service: Annotated[CommentService, Depends(get_comment_service)],
) -> Response:
    """Delete the caller's comment."""
    comment_uuid = parse_uuid(comment_id, "comment ID")
    try:
        await service.delete(comment_uuid, identity_id)
    except WITError as e:
        abort_with_error(e, "Failed to delete comment")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
