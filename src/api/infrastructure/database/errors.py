"""Translation of SQLAlchemy failures into domain error kinds."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shared_kernel.exceptions import ConflictError, InternalError


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """Re-raise store failures as ConflictError or InternalError.

    Domain errors raised inside the block pass through untouched, and so does
    ``asyncio.CancelledError``.

    Args:
        operation: Short description used in the error message, e.g.
            "create comment".
    """
    try:
        yield
    except IntegrityError as e:
        raise ConflictError(f"Failed to {operation}: conflicting row") from e
    except SQLAlchemyError as e:
        raise InternalError(f"Failed to {operation}") from e
