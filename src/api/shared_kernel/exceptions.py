"""Error kinds shared by every bounded context.

Each kind survives the trip across layers unchanged. Only the presentation
layer translates kinds into HTTP status codes (see
``shared_kernel.presentation.abort_with_error``).
"""

from __future__ import annotations

from typing import Any


class WITError(Exception):
    """Base class for all domain errors raised by the WIT service."""

    pass


class BadRequestError(WITError):
    """Raised when request input is malformed (e.g. an unparsable UUID)."""

    pass


class UnauthorizedError(WITError):
    """Raised when a credential is absent, invalid or expired."""

    pass


class ForbiddenError(WITError):
    """Raised when an authenticated caller may not act on a resource."""

    pass


class NotFoundError(WITError):
    """Raised when an entity does not exist (or has been deleted)."""

    def __init__(self, entity: str, id: Any) -> None:
        self.entity = entity
        self.id = id
        super().__init__(f"{entity} with id '{id}' not found")


class ConflictError(WITError):
    """Raised when a write collides with existing state."""

    pass


class InvalidArgumentError(WITError):
    """Raised when an argument fails semantic validation."""

    def __init__(self, name: str, value: Any, reason: str | None = None) -> None:
        self.name = name
        self.value = value
        message = f"Bad value for parameter '{name}': '{value}'"
        if reason:
            message = f"{message} - {reason}"
        super().__init__(message)


class ContentionExhaustedError(WITError):
    """Raised when a contended write still fails after its retry budget."""

    pass


class InternalError(WITError):
    """Raised for store or I/O failures not otherwise classified.

    The original exception is kept as ``__cause__`` for operators; its
    message never reaches an HTTP response body.
    """

    pass


class InvalidTokenError(UnauthorizedError):
    """Raised when a bearer credential fails to parse or verify."""

    pass


class MissingTokenError(UnauthorizedError):
    """Raised when no parsed token is attached to the request."""

    pass


class MissingSubjectError(UnauthorizedError):
    """Raised when a token carries no ``sub`` claim."""

    pass


class InvalidSubjectError(UnauthorizedError):
    """Raised when the ``sub`` claim is not a UUID."""

    pass


class InvalidClaimsError(UnauthorizedError):
    """Raised when a required claim has the wrong type."""

    pass


class ConfigurationError(WITError):
    """Raised when a component is used without the configuration it needs."""

    pass
