"""Bearer token manager.

Verifies RS256-signed JWTs against a configured public key and maps them to
caller identities. A manager built from a private key can also sign tokens;
that mode is meant for test helpers and local tooling.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Mapping
from uuid import UUID

from jose import JWTError, jwk, jwt
from jose.constants import ALGORITHMS
from jose.exceptions import ExpiredSignatureError, JOSEError, JWTClaimsError

from shared_kernel.auth.identity import AuthContext, Identity
from shared_kernel.auth.observability import DefaultTokenManagerProbe
from shared_kernel.exceptions import (
    ConfigurationError,
    InvalidClaimsError,
    InvalidSubjectError,
    InvalidTokenError,
    MissingSubjectError,
    MissingTokenError,
)

if TYPE_CHECKING:
    from shared_kernel.auth.observability import TokenManagerProbe

SUBJECT_CLAIM = "sub"
USERNAME_CLAIM = "preferred_username"
SERVICE_ACCOUNT_CLAIM = "service_accountname"
SERVICE_ACCOUNT_NAME = "auth"


class TokenManager:
    """Parses bearer credentials and extracts caller identities.

    Holds only immutable key material and is safe to share between
    concurrent requests. Rotating keys means building a new manager.
    """

    def __init__(
        self,
        public_key_pem: str,
        private_key_pem: str | None = None,
        probe: TokenManagerProbe | None = None,
    ) -> None:
        """Initialize the manager.

        Prefer the ``from_public_key`` and ``from_private_key`` constructors.

        Args:
            public_key_pem: RSA public key (PEM) used to verify signatures.
            private_key_pem: RSA private key (PEM), only needed for signing.
            probe: Optional domain probe for observability.
        """
        self._public_key_pem = public_key_pem
        self._private_key_pem = private_key_pem
        self._probe = probe or DefaultTokenManagerProbe()

    @classmethod
    def from_public_key(
        cls, public_key_pem: str, probe: TokenManagerProbe | None = None
    ) -> TokenManager:
        """Create a verify-only manager."""
        return cls(public_key_pem=public_key_pem, probe=probe)

    @classmethod
    def from_private_key(
        cls, private_key_pem: str, probe: TokenManagerProbe | None = None
    ) -> TokenManager:
        """Create a sign-and-verify manager, deriving the public key."""
        try:
            key = jwk.construct(private_key_pem, ALGORITHMS.RS256)
            public_key_pem = key.public_key().to_pem().decode("utf-8")
        except JOSEError as e:
            raise ConfigurationError(f"Invalid RSA private key: {e}") from e
        return cls(
            public_key_pem=public_key_pem,
            private_key_pem=private_key_pem,
            probe=probe,
        )

    @property
    def can_sign(self) -> bool:
        """Whether this manager holds a private key."""
        return self._private_key_pem is not None

    def public_key(self) -> str:
        """Return the verifier key (PEM)."""
        return self._public_key_pem

    def parse(self, credential: str) -> dict[str, Any]:
        """Verify a credential and return its claims.

        Checks the RS256 signature and the ``exp`` claim, which is required.

        Raises:
            InvalidTokenError: If the token is malformed, badly signed,
                expired or lacks an expiry.
        """
        try:
            claims = jwt.decode(
                token=credential,
                key=self._public_key_pem,
                algorithms=[ALGORITHMS.RS256],
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "verify_aud": False,
                    "require_exp": True,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.token_rejected(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_rejected(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            self._probe.token_rejected(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        if not isinstance(claims, dict):
            self._probe.token_rejected(reason="Token payload is not an object")
            raise InvalidTokenError("Token not valid")
        return claims

    def extract(self, credential: str) -> Identity:
        """Verify a credential and return the identity it names.

        Raises:
            InvalidTokenError: If the token fails verification.
            MissingSubjectError: If the ``sub`` claim is absent.
            InvalidSubjectError: If ``sub`` is not a UUID.
            InvalidClaimsError: If ``preferred_username`` is not a string.
        """
        return self.identity_from_claims(self.parse(credential))

    def identity_from_claims(self, claims: Mapping[str, Any]) -> Identity:
        """Map verified claims to an identity.

        Raises:
            MissingSubjectError: If the ``sub`` claim is absent.
            InvalidSubjectError: If ``sub`` is not a UUID.
            InvalidClaimsError: If ``preferred_username`` is not a string.
        """
        identity_id = self._subject(claims)

        username = claims.get(USERNAME_CLAIM)
        if not isinstance(username, str):
            self._probe.token_rejected(reason=f"Invalid {USERNAME_CLAIM} claim")
            raise InvalidClaimsError(f"Claim '{USERNAME_CLAIM}' must be a string")

        self._probe.identity_extracted(identity_id=str(identity_id))
        return Identity(id=identity_id, username=username)

    def locate(self, auth_context: AuthContext) -> UUID:
        """Return the identity id carried by an already-parsed token.

        Raises:
            MissingTokenError: If the context holds no token.
            MissingSubjectError: If the token has no ``sub`` claim.
            InvalidSubjectError: If ``sub`` is not a UUID.
        """
        if auth_context.claims is None:
            self._probe.token_rejected(reason="Missing token")
            raise MissingTokenError("Missing token")
        return self._subject(auth_context.claims)

    def is_service_account(self, auth_context: AuthContext) -> bool:
        """Whether the attached token belongs to the auth service account."""
        if auth_context.claims is None:
            return False
        service_account = auth_context.claims.get(SERVICE_ACCOUNT_CLAIM)
        return service_account == SERVICE_ACCOUNT_NAME

    def sign(self, claims: Mapping[str, Any]) -> str:
        """Sign ``claims`` as an RS256 JWT.

        Raises:
            ConfigurationError: If the manager was built without a private key.
        """
        if self._private_key_pem is None:
            raise ConfigurationError("Token manager has no private key to sign with")
        return jwt.encode(
            dict(claims), self._private_key_pem, algorithm=ALGORITHMS.RS256
        )

    def _subject(self, claims: Mapping[str, Any]) -> UUID:
        subject = claims.get(SUBJECT_CLAIM)
        if subject is None:
            self._probe.token_rejected(reason=f"Missing {SUBJECT_CLAIM} claim")
            raise MissingSubjectError("Subject can not be nil")
        try:
            return UUID(str(subject))
        except ValueError as e:
            self._probe.token_rejected(reason=f"Invalid {SUBJECT_CLAIM} claim")
            raise InvalidSubjectError(f"Subject '{subject}' is not a UUID") from e


def token_for_identity(
    manager: TokenManager,
    identity: Identity,
    expires_in: timedelta = timedelta(hours=1),
    extra_claims: Mapping[str, Any] | None = None,
) -> str:
    """Sign a token for ``identity``; negative ``expires_in`` yields an expired one."""
    now = datetime.now(tz=timezone.utc)
    claims: dict[str, Any] = {
        SUBJECT_CLAIM: str(identity.id),
        USERNAME_CLAIM: identity.username,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    if extra_claims:
        claims.update(extra_claims)
    return manager.sign(claims)
