"""FastAPI dependencies for authentication and the account context.

The bearer token is verified once per request by ``get_auth_context``; every
other dependency composes on that cached result.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from account.application import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
    DefaultIdentityServiceProbe,
    IdentityService,
    IdentityServiceProbe,
)
from account.infrastructure import IdentityRepository, UserRepository
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import get_auth_settings
from shared_kernel.auth import AuthContext, Identity, TokenManager
from shared_kernel.exceptions import (
    ConfigurationError,
    MissingTokenError,
    UnauthorizedError,
)
from shared_kernel.presentation import abort_with_error

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def build_token_manager() -> TokenManager:
    """Build the process-wide token manager.

    Keys are read once; rotating them requires a restart. A configured
    private key yields a sign-and-verify manager, otherwise the manager only
    verifies.

    Raises:
        ConfigurationError: If no key is configured
    """
    settings = get_auth_settings()
    private_key = settings.resolve_private_key_pem()
    if private_key is not None:
        return TokenManager.from_private_key(private_key)

    public_key = settings.resolve_public_key_pem()
    if public_key is not None:
        return TokenManager.from_public_key(public_key)

    raise ConfigurationError(
        "No token key configured: set WIT_AUTH_PUBLIC_KEY or WIT_AUTH_PRIVATE_KEY"
    )


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance."""
    return DefaultAuthenticationProbe()


def get_identity_service_probe() -> IdentityServiceProbe:
    """Get IdentityServiceProbe instance."""
    return DefaultIdentityServiceProbe()


def get_token_manager(
    probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
) -> TokenManager:
    """Get the token manager (FastAPI dependency).

    Raises:
        HTTPException 500: If no key is configured
    """
    try:
        return build_token_manager()
    except ConfigurationError as e:
        probe.authentication_failed(reason=str(e))
        abort_with_error(e, "Authentication is not configured")


async def get_auth_context(
    manager: Annotated[TokenManager, Depends(get_token_manager)],
    probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> AuthContext:
    """Verify the bearer token, if any, and attach its claims to the request.

    Requests without a token get an anonymous context. A token that is
    present but invalid is rejected with 401.
    """
    if credentials is None:
        return AuthContext.anonymous()

    try:
        claims = manager.parse(credentials.credentials)
    except UnauthorizedError as e:
        probe.authentication_failed(reason=str(e))
        abort_with_error(e)

    return AuthContext(claims=claims)


def get_identity_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> IdentityRepository:
    """Get IdentityRepository instance."""
    return IdentityRepository(session=session)


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserRepository:
    """Get UserRepository instance."""
    return UserRepository(session=session)


def get_identity_service(
    identity_repo: Annotated[IdentityRepository, Depends(get_identity_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[IdentityServiceProbe, Depends(get_identity_service_probe)],
) -> IdentityService:
    """Get IdentityService instance.

    Args:
        identity_repo: Identity repository (shares session via FastAPI caching)
        session: Database session for transaction management
        probe: Identity service probe for observability
    """
    return IdentityService(
        identity_repository=identity_repo,
        session=session,
        probe=probe,
    )


async def get_current_identity(
    auth_context: Annotated[AuthContext, Depends(get_auth_context)],
    manager: Annotated[TokenManager, Depends(get_token_manager)],
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
    probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
) -> Identity:
    """Require an authenticated caller and provision its identity.

    Raises:
        HTTPException 401: If the request carries no usable token
    """
    try:
        if auth_context.claims is None:
            raise MissingTokenError("Not authenticated")
        identity = manager.identity_from_claims(auth_context.claims)
    except UnauthorizedError as e:
        probe.authentication_failed(reason=str(e))
        abort_with_error(e)

    await identity_service.ensure_identity(identity)
    probe.identity_authenticated(
        identity_id=str(identity.id), username=identity.username
    )
    return identity


def get_current_identity_id(
    auth_context: Annotated[AuthContext, Depends(get_auth_context)],
    manager: Annotated[TokenManager, Depends(get_token_manager)],
) -> UUID:
    """Locate the caller's identity id without provisioning it.

    Raises:
        HTTPException 401: If the request carries no usable token
    """
    try:
        return manager.locate(auth_context)
    except UnauthorizedError as e:
        abort_with_error(e)
