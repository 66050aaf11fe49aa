"""SQLAlchemy ORM model for the comments table."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, SoftDeleteMixin, TimestampMixin


class CommentModel(Base, TimestampMixin, SoftDeleteMixin):
    """ORM model for the comments table.

    parent_id is free text, not a foreign key.
    """

    __tablename__ = "comments"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    parent_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    markup: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CommentModel(id={self.id}, parent_id={self.parent_id})>"
