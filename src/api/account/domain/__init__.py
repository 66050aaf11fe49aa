"""Account domain: users and the identities they own."""

from account.domain.identity import KEYCLOAK_PROVIDER, IdentityRecord
from account.domain.user import User

__all__ = [
    "KEYCLOAK_PROVIDER",
    "IdentityRecord",
    "User",
]
