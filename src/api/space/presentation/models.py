"""JSON-API request and response documents for spaces."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from shared_kernel.presentation import (
    ListLinks,
    ListMeta,
    RelatedLink,
    Relationship,
    RelationshipData,
)
from space.domain import Space

SPACE_TYPE = "spaces"


class SpaceAttributes(BaseModel):
    """Attributes of a space resource."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Space name")
    description: str = Field(default="", description="Free-form description")
    version: int = Field(..., description="Version for optimistic locking")
    created_at: datetime | None = Field(default=None, alias="created-at")
    updated_at: datetime | None = Field(default=None, alias="updated-at")


class SpaceLinks(BaseModel):
    """``links`` of a space: itself and its work items with counters."""

    model_config = ConfigDict(populate_by_name=True)

    self_: str = Field(..., alias="self")
    workitems: RelatedLink


class SpaceResource(BaseModel):
    """A space resource object."""

    type: Literal["spaces"] = SPACE_TYPE
    id: str
    attributes: SpaceAttributes
    relationships: dict[str, Relationship] = Field(default_factory=dict)
    links: SpaceLinks

    @classmethod
    def from_domain(
        cls, space: Space, api_base_url: str, work_item_count: int
    ) -> SpaceResource:
        """Convert a Space to its resource object.

        Args:
            space: Space domain object
            api_base_url: Public API base URL for links
            work_item_count: Number of work items in the space
        """
        self_url = space_url(api_base_url, str(space.id))
        relationships = {}
        if space.owner_id is not None:
            relationships["owned-by"] = Relationship(
                data=RelationshipData(type="identities", id=str(space.owner_id))
            )
        return cls(
            id=str(space.id),
            attributes=SpaceAttributes(
                name=space.name,
                description=space.description,
                version=space.version,
                created_at=space.created_at,
                updated_at=space.updated_at,
            ),
            relationships=relationships,
            links=SpaceLinks(
                self_=self_url,
                workitems=RelatedLink(
                    related=f"{self_url}/workitems",
                    meta={"counts": {"likes": 0, "workitems": work_item_count}},
                ),
            ),
        )


class SpaceSingle(BaseModel):
    """Document holding one space."""

    data: SpaceResource


class SpaceList(BaseModel):
    """Document holding one page of spaces."""

    data: list[SpaceResource]
    links: ListLinks
    meta: ListMeta


class CreateSpaceAttributes(BaseModel):
    """Attributes accepted when creating a space."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Platform"])
    description: str = Field(default="", examples=["Platform team backlog"])


class CreateSpaceData(BaseModel):
    """Resource object of a create-space request."""

    type: Literal["spaces"]
    attributes: CreateSpaceAttributes


class CreateSpaceRequest(BaseModel):
    """Request document to create a space."""

    data: CreateSpaceData


def space_url(api_base_url: str, space_id: str) -> str:
    """Absolute URL of a space resource."""
    return f"{api_base_url}/api/spaces/{space_id}"
