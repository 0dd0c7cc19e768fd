from __future__ import annotations

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]

from vinped.core.db import database_manager


async def database_session() -> AsyncGenerator[AsyncSession, None]:
    # One pooled session per request; released when the request finishes,
    # whichever path it takes.
    await database_manager.initialize()
    async with database_manager.session() as session:
        yield session
