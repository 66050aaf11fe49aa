"""SQLAlchemy ORM models for the work item context."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, SoftDeleteMixin, TimestampMixin


class WorkItemModel(Base, TimestampMixin, SoftDeleteMixin):
    """ORM model for the work_items table.

    The description is stored as a ``{"content", "markup"}`` document.
    """

    __tablename__ = "work_items"
    __table_args__ = (
        UniqueConstraint("space_id", "number", name="uq_work_items_space_number"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    space_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("spaces.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )
    created_by: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<WorkItemModel(id={self.id}, number={self.number})>"


class WorkItemNumberSequenceModel(Base):
    """ORM model for the work_item_number_sequences table.

    One row per space, holding the last number handed out.
    """

    __tablename__ = "work_item_number_sequences"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    space_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True)
    current_val: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<WorkItemNumberSequenceModel(space_id={self.space_id}, "
            f"current_val={self.current_val})>"
        )
