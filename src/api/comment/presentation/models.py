"""JSON-API request and response documents for comments."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from comment.domain import Comment
from shared_kernel.presentation import (
    ListLinks,
    ListMeta,
    Relationship,
    RelationshipData,
    ResourceLinks,
)

COMMENT_TYPE = "comments"


class CommentAttributes(BaseModel):
    """Attributes of a comment resource."""

    model_config = ConfigDict(populate_by_name=True)

    body: str
    body_rendered: str = Field(..., alias="body.rendered")
    markup: str
    created_at: datetime | None = Field(default=None, alias="created-at")
    updated_at: datetime | None = Field(default=None, alias="updated-at")


class CommentResource(BaseModel):
    """A comment resource object."""

    type: Literal["comments"] = COMMENT_TYPE
    id: str
    attributes: CommentAttributes
    relationships: dict[str, Relationship] = Field(default_factory=dict)
    links: ResourceLinks

    @classmethod
    def from_domain(
        cls, comment: Comment, rendered_body: str, api_base_url: str
    ) -> CommentResource:
        """Convert a Comment to its resource object."""
        relationships = {}
        if comment.created_by is not None:
            relationships["created-by"] = Relationship(
                data=RelationshipData(type="identities", id=str(comment.created_by))
            )
        return cls(
            id=str(comment.id),
            attributes=CommentAttributes(
                body=comment.body,
                body_rendered=rendered_body,
                markup=comment.markup,
                created_at=comment.created_at,
                updated_at=comment.updated_at,
            ),
            relationships=relationships,
            links=ResourceLinks(self_=comment_url(api_base_url, comment.id)),
        )


class CommentSingle(BaseModel):
    """Document holding one comment."""

    data: CommentResource


class CommentList(BaseModel):
    """Document holding one page of comments."""

    data: list[CommentResource]
    links: ListLinks
    meta: ListMeta


class CreateCommentAttributes(BaseModel):
    """Attributes accepted when commenting."""

    body: str = Field(..., min_length=1)
    markup: str | None = Field(default=None, examples=["plaintext", "markdown"])


class CreateCommentData(BaseModel):
    """Resource object of a create-comment request."""

    type: Literal["comments"]
    attributes: CreateCommentAttributes


class CreateCommentRequest(BaseModel):
    """Request document to comment on a work item."""

    data: CreateCommentData


class UpdateCommentAttributes(BaseModel):
    """Attributes that may change on an existing comment."""

    body: str | None = None
    markup: str | None = None


class UpdateCommentData(BaseModel):
    """Resource object of an update-comment request."""

    type: Literal["comments"]
    id: str | None = None
    attributes: UpdateCommentAttributes


class UpdateCommentRequest(BaseModel):
    """Request document to update a comment."""

    data: UpdateCommentData


def comment_url(api_base_url: str, comment_id: object) -> str:
    """Absolute URL of a comment resource."""
    return f"{api_base_url}/api/comments/{comment_id}"
