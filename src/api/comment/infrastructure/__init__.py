"""Comment infrastructure: ORM model and repository."""

from comment.infrastructure.comment_repository import CommentRepository

__all__ = ["CommentRepository"]
