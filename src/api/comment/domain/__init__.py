"""Comment domain."""

from comment.domain.comment import Comment

__all__ = ["Comment"]
