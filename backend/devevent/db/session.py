"""
Async session helpers bound to the shared engine.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from devevent.db.connection import get_connection


def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_session(engine: Optional[AsyncEngine] = None) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session that commits when the block exits cleanly and rolls back
    on any error, so a failed validation never leaves a partial write.

        async with get_session() as db:
            await create_event(db, payload)
    """
    if engine is None:
        engine = await get_connection()

    async with make_sessionmaker(engine)() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise
