"""Presentation helpers shared by the JSON-API resources.

Holds the single mapping from domain error kinds to HTTP status codes and the
pydantic models common to every JSON-API document.
"""

from __future__ import annotations

from typing import Annotated, Any, NoReturn
from uuid import UUID

from fastapi import HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from shared_kernel.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    UnauthorizedError,
)
from shared_kernel.paging import PagingLinks, compute_paging_limits

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class JSONAPIResponse(JSONResponse):
    """JSON response served with the JSON-API media type."""

    media_type = JSONAPI_MEDIA_TYPE


def abort_with_error(
    error: Exception, internal_detail: str = "Internal server error"
) -> NoReturn:
    """Raise the HTTPException matching the kind of ``error``.

    Unclassified errors become a 500 with ``internal_detail``; their message
    is never exposed to the client.
    """
    if isinstance(error, (BadRequestError, InvalidArgumentError)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(error)
        ) from error
    if isinstance(error, UnauthorizedError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(error),
            headers={"WWW-Authenticate": "Bearer"},
        ) from error
    if isinstance(error, ForbiddenError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail=str(error)
        ) from error
    if isinstance(error, NotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(error)
        ) from error
    if isinstance(error, ConflictError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(error)
        ) from error
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=internal_detail,
    ) from error


def parse_uuid(value: str, name: str) -> UUID:
    """Parse a path parameter as a UUID.

    Raises:
        HTTPException 400: If ``value`` is not a UUID
    """
    try:
        return UUID(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {name} format: '{value}'",
        )


class ResourceLinks(BaseModel):
    """``links`` member of a single resource."""

    model_config = ConfigDict(populate_by_name=True)

    self_: str = Field(..., alias="self", description="Resource URL")


class RelatedLink(BaseModel):
    """A link to related resources, optionally carrying counters."""

    related: str = Field(..., description="Related resource URL")
    meta: dict[str, Any] | None = Field(
        default=None, description="Counters such as likes or workitems"
    )


class RelationshipData(BaseModel):
    """Resource identifier object."""

    type: str
    id: str


class Relationship(BaseModel):
    """A to-one relationship."""

    data: RelationshipData
    links: RelatedLink | None = None


class ListLinks(BaseModel):
    """Top-level paging links of a list document."""

    first: str
    last: str
    prev: str | None = None
    next: str | None = None

    @classmethod
    def from_paging(cls, links: PagingLinks) -> ListLinks:
        """Convert paging links to the response model."""
        return cls(first=links.first, last=links.last, prev=links.prev, next=links.next)


class ListMeta(BaseModel):
    """Top-level meta of a list document."""

    model_config = ConfigDict(populate_by_name=True)

    total_count: int = Field(..., alias="totalCount")


def get_page(
    offset: Annotated[int | None, Query(alias="page[offset]")] = None,
    limit: Annotated[int | None, Query(alias="page[limit]")] = None,
) -> tuple[int, int]:
    """Read ``page[offset]`` and ``page[limit]`` and clamp them (FastAPI dependency)."""
    return compute_paging_limits(offset, limit)
