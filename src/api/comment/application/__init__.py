"""Comment application layer."""

from comment.application.observability import (
    CommentServiceProbe,
    DefaultCommentServiceProbe,
)
from comment.application.services import CommentService

__all__ = [
    "CommentService",
    "CommentServiceProbe",
    "DefaultCommentServiceProbe",
]
