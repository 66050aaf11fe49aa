"""Account infrastructure: ORM models and repositories."""

from account.infrastructure.identity_repository import IdentityRepository
from account.infrastructure.user_repository import UserRepository

__all__ = [
    "IdentityRepository",
    "UserRepository",
]
