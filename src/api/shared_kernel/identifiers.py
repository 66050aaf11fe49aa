"""Identifier helpers."""

from uuid import UUID

NIL_UUID = UUID(int=0)


def is_nil(value: UUID | None) -> bool:
    """Whether ``value`` is missing or the all-zero UUID."""
    return value is None or value == NIL_UUID
