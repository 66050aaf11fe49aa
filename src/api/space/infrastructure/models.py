"""SQLAlchemy ORM model for the spaces table."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, SoftDeleteMixin, TimestampMixin


class SpaceModel(Base, TimestampMixin, SoftDeleteMixin):
    """ORM model for the spaces table."""

    __tablename__ = "spaces"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    owner_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<SpaceModel(id={self.id}, name={self.name})>"
