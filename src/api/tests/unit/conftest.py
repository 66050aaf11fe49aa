"""Unit test fixtures: RSA keys, token managers and an on-disk SQLite store.

Store tests run against a fresh SQLite database per test (through
aiosqlite) so repositories execute real SQL without a PostgreSQL server.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from account.infrastructure import models as account_models  # noqa: F401
from comment.infrastructure import models as comment_models  # noqa: F401
from infrastructure.database.models import Base
from shared_kernel.auth import TokenManager
from space.infrastructure import models as space_models  # noqa: F401
from workitem.infrastructure import models as workitem_models  # noqa: F401


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """One RSA key pair for the whole test session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    """Private key as PKCS#1 PEM."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


@pytest.fixture(scope="session")
def public_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    """Public key as SubjectPublicKeyInfo PEM."""
    return (
        rsa_private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode("utf-8")
    )


@pytest.fixture
def signing_manager(private_key_pem: str) -> TokenManager:
    """Token manager able to sign test tokens."""
    return TokenManager.from_private_key(private_key_pem)


@pytest.fixture
def verifying_manager(public_key_pem: str) -> TokenManager:
    """Verify-only token manager sharing the signing manager's key pair."""
    return TokenManager.from_public_key(public_key_pem)


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Async engine over a fresh SQLite file with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'wit.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessionmaker configured like the application's write sessionmaker."""
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def session(
    sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A session on the test database."""
    async with sessionmaker() as session:
        yield session
