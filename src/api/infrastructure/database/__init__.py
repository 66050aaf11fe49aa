"""Database infrastructure - async engines, sessions and the declarative base."""

from infrastructure.database.errors import translate_store_errors
from infrastructure.database.models import (
    Base,
    SoftDeleteMixin,
    TimestampMixin,
    UTCDateTime,
    utc_now,
)
from infrastructure.database.transactions import transaction

__all__ = [
    "Base",
    "SoftDeleteMixin",
    "TimestampMixin",
    "transaction",
    "translate_store_errors",
    "UTCDateTime",
    "utc_now",
]
