"""Ports for the comment context."""

from comment.ports.repositories import ICommentRepository

__all__ = ["ICommentRepository"]
