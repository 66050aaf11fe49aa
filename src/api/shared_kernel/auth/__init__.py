"""Authentication shared kernel module."""

from shared_kernel.auth.identity import AuthContext, Identity
from shared_kernel.auth.observability import (
    DefaultTokenManagerProbe,
    TokenManagerProbe,
)
from shared_kernel.auth.token_manager import TokenManager, token_for_identity

__all__ = [
    "AuthContext",
    "DefaultTokenManagerProbe",
    "Identity",
    "TokenManager",
    "TokenManagerProbe",
    "token_for_identity",
]
