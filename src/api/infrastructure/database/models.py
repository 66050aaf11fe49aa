"""Declarative base and column mixins shared by every ORM model.

All timestamps are timezone-aware UTC. Rows carrying a ``deleted_at`` are
soft-deleted and invisible to repository reads.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, TypeDecorator
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Current UTC time; also the INSERT/UPDATE default of the mixins."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator[datetime]):
    """``TIMESTAMP WITH TIME ZONE`` that always reads back as aware UTC.

    SQLite has no zone-aware timestamps and returns naive values, which are
    UTC because only UTC values are ever written.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(
        self, value: datetime | None, dialect: Dialect
    ) -> datetime | None:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(
        self, value: datetime | None, dialect: Dialect
    ) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    """Base class of the users, identities, spaces, work item and comment models.

    ``Base.metadata`` is what Alembic autogenerates against and what the
    SQLite-backed tests create tables from.
    """

    type_annotation_map: dict[type, Any] = {}


class TimestampMixin:
    """``created_at`` set on INSERT, ``updated_at`` refreshed on every UPDATE.

    Repositories that need the exact values returned to callers set both
    columns explicitly.
    """

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), insert_default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        insert_default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )


class SoftDeleteMixin:
    """Nullable ``deleted_at``; NULL means the row is live."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime(), nullable=True, default=None
    )
