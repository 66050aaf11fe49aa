"""Transaction helpers shared by the repositories."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run the block inside a transaction on ``session``.

    When the caller (usually an application service) already opened a
    transaction the block joins it and commit/rollback stays with the caller.
    Otherwise a new transaction is started and committed when the block exits
    cleanly, or rolled back on any exception, cancellation included.
    """
    if session.in_transaction():
        yield session
        return

    async with session.begin():
        yield session
