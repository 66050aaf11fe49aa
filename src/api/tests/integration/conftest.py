"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Tests are skipped
when the database cannot be reached.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from account.infrastructure import models as account_models  # noqa: F401
from comment.infrastructure import models as comment_models  # noqa: F401
from infrastructure.database.engines import build_async_url
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings
from space.infrastructure import models as space_models  # noqa: F401
from workitem.infrastructure import models as workitem_models  # noqa: F401


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires PostgreSQL)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        WIT_DB_HOST, WIT_DB_PORT, etc.
    """
    return DatabaseSettings(
        _env_file=None,
        host=os.getenv("WIT_DB_HOST", "localhost"),
        port=int(os.getenv("WIT_DB_PORT", "5432")),
        database=os.getenv("WIT_DB_DATABASE", "wit_test"),
        username=os.getenv("WIT_DB_USERNAME", "wit"),
        password=SecretStr(os.getenv("WIT_DB_PASSWORD", "wit_dev_password")),
    )


@pytest_asyncio.fixture
async def pg_engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Engine on a freshly created schema; skips when PostgreSQL is down."""
    engine = create_async_engine(
        build_async_url(integration_db_settings), pool_size=20, max_overflow=0
    )
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, SQLAlchemyError) as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL not available: {e}")

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def pg_sessionmaker(pg_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(pg_engine, expire_on_commit=False, class_=AsyncSession)
