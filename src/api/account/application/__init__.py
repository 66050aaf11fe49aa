"""Account application layer."""

from account.application.identity_service import IdentityService
from account.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
    DefaultIdentityServiceProbe,
    IdentityServiceProbe,
)

__all__ = [
    "AuthenticationProbe",
    "DefaultAuthenticationProbe",
    "DefaultIdentityServiceProbe",
    "IdentityService",
    "IdentityServiceProbe",
]
