"""JSON-API request and response documents for work items and rendering."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from shared_kernel.markup import MarkupContent
from shared_kernel.presentation import (
    ListLinks,
    ListMeta,
    RelatedLink,
    Relationship,
    RelationshipData,
    ResourceLinks,
)
from workitem.domain import WorkItem

WORK_ITEM_TYPE = "workitems"
RENDERING_TYPE = "rendering"


class WorkItemAttributes(BaseModel):
    """Attributes of a work item resource."""

    model_config = ConfigDict(populate_by_name=True)

    number: int = Field(..., description="Per-space work item number")
    title: str
    description: str = Field(default="", description="Raw description text")
    description_markup: str = Field(..., alias="description.markup")
    description_rendered: str = Field(..., alias="description.rendered")
    created_at: datetime | None = Field(default=None, alias="created-at")
    updated_at: datetime | None = Field(default=None, alias="updated-at")


class WorkItemResource(BaseModel):
    """A work item resource object."""

    type: Literal["workitems"] = WORK_ITEM_TYPE
    id: str
    attributes: WorkItemAttributes
    relationships: dict[str, Relationship] = Field(default_factory=dict)
    links: ResourceLinks

    @classmethod
    def from_domain(
        cls, work_item: WorkItem, rendered_description: str, api_base_url: str
    ) -> WorkItemResource:
        """Convert a WorkItem to its resource object.

        Args:
            work_item: WorkItem domain object
            rendered_description: HTML of the description
            api_base_url: Public API base URL for links
        """
        space_link = f"{api_base_url}/api/spaces/{work_item.space_id}"
        relationships = {
            "space": Relationship(
                data=RelationshipData(type="spaces", id=str(work_item.space_id)),
                links=RelatedLink(related=space_link),
            )
        }
        if work_item.created_by is not None:
            relationships["creator"] = Relationship(
                data=RelationshipData(type="identities", id=str(work_item.created_by))
            )
        return cls(
            id=str(work_item.id),
            attributes=WorkItemAttributes(
                number=work_item.number,
                title=work_item.title,
                description=work_item.description.content,
                description_markup=work_item.description.markup,
                description_rendered=rendered_description,
                created_at=work_item.created_at,
                updated_at=work_item.updated_at,
            ),
            relationships=relationships,
            links=ResourceLinks(
                self_=work_item_url(api_base_url, work_item.space_id, work_item.id)
            ),
        )


class WorkItemSingle(BaseModel):
    """Document holding one work item."""

    data: WorkItemResource


class WorkItemList(BaseModel):
    """Document holding one page of work items."""

    data: list[WorkItemResource]
    links: ListLinks
    meta: ListMeta


class AttachedComment(BaseModel):
    """A first comment posted together with a new work item."""

    body: str
    markup: str | None = None


class CreateWorkItemAttributes(BaseModel):
    """Attributes accepted when creating a work item."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=512, examples=["Fix login"])
    description: str = Field(default="")
    description_markup: str | None = Field(default=None, alias="description.markup")
    comment: AttachedComment | None = None

    def description_content(self) -> MarkupContent:
        """Description as markup content; a missing tag means plaintext."""
        if self.description_markup is None:
            return MarkupContent(self.description)
        return MarkupContent(self.description, self.description_markup)


class CreateWorkItemData(BaseModel):
    """Resource object of a create-work-item request."""

    type: Literal["workitems"]
    attributes: CreateWorkItemAttributes


class CreateWorkItemRequest(BaseModel):
    """Request document to create a work item."""

    data: CreateWorkItemData


class RenderAttributes(BaseModel):
    """Content to render."""

    content: str
    markup: str
    space_id: str | None = Field(
        default=None, description="Space in which #<number> references resolve"
    )


class RenderRequestData(BaseModel):
    """Resource object of a render request."""

    type: Literal["rendering"] = RENDERING_TYPE
    attributes: RenderAttributes


class RenderRequest(BaseModel):
    """Request document to render markup content."""

    data: RenderRequestData


class RenderedAttributes(BaseModel):
    """Rendered HTML."""

    model_config = ConfigDict(populate_by_name=True)

    rendered_content: str = Field(..., alias="renderedContent")


class RenderedResource(BaseModel):
    """Resource object of a render response."""

    type: Literal["rendering"] = RENDERING_TYPE
    id: str
    attributes: RenderedAttributes


class RenderResponse(BaseModel):
    """Document holding rendered content."""

    data: RenderedResource


def work_item_url(api_base_url: str, space_id: object, work_item_id: object) -> str:
    """Absolute URL of a work item resource."""
    return f"{api_base_url}/api/spaces/{space_id}/workitems/{work_item_id}"
