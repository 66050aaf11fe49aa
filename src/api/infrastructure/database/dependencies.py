"""Session providers for FastAPI.

One write engine and one read engine per process, both created on first
use from ``DatabaseSettings`` and disposed on application shutdown.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import (
    build_async_url,
    create_read_engine,
    create_write_engine,
)
from infrastructure.observability import DefaultDatabaseProbe
from infrastructure.settings import DatabaseSettings, get_database_settings

_probe = DefaultDatabaseProbe()


@dataclass
class _EngineSlot:
    """Lazily built engine plus the sessionmaker bound to it."""

    role: str
    factory: Callable[[DatabaseSettings], AsyncEngine]
    engine: AsyncEngine | None = None
    sessionmaker: async_sessionmaker[AsyncSession] | None = None

    def get_sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        if self.sessionmaker is None:
            with _engine_lock:
                if self.sessionmaker is None:
                    settings = get_database_settings()
                    self.engine = self.factory(settings)
                    self.sessionmaker = async_sessionmaker(
                        self.engine, expire_on_commit=False, class_=AsyncSession
                    )
                    _probe.engine_created(
                        role=self.role, url=settings.connection_string
                    )
        return self.sessionmaker

    async def dispose(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self.sessionmaker = None
        _probe.engine_disposed(role=self.role)


_engine_lock = threading.Lock()
_write = _EngineSlot(role="write", factory=create_write_engine)
_read = _EngineSlot(role="read", factory=create_read_engine)


def get_write_engine() -> AsyncEngine:
    """Return the process-wide write engine, creating it on first call."""
    _write.get_sessionmaker()
    assert _write.engine is not None
    return _write.engine


def get_read_engine() -> AsyncEngine:
    """Return the process-wide read engine, creating it on first call."""
    _read.get_sessionmaker()
    assert _read.engine is not None
    return _read.engine


def get_write_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the write sessionmaker (FastAPI dependency).

    Components that own their transactions end to end, such as the work item
    number allocator, open their own sessions from this factory instead of
    sharing the request session.
    """
    return _write.get_sessionmaker()


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide the request's write session (FastAPI dependency).

    Nothing is committed here: repositories and services open their own
    transactions on the session.
    """
    async with _write.get_sessionmaker()() as session:
        yield session


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session on the read engine (FastAPI dependency)."""
    async with _read.get_sessionmaker()() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose both engines; the next request creates them again."""
    await _write.dispose()
    await _read.dispose()


__all__ = [
    "build_async_url",
    "close_database_connections",
    "get_read_engine",
    "get_read_session",
    "get_write_engine",
    "get_write_session",
    "get_write_sessionmaker",
]
