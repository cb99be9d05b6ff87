"""
Pytest fixtures for the test database and sample records.

Persistence tests run against an in-memory SQLite database; tables are
created before and dropped after every test for isolation.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from devevent.db.base import Base
from devevent.db.session import make_sessionmaker
from devevent.models import Event, Booking  # noqa: F401 - register tables on Base.metadata

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def event_payload() -> dict:
    """A raw event as a caller would submit it, before normalization."""
    return {
        "title": "  Cloud Next 2026  ",
        "description": "Google Cloud's annual conference.",
        "overview": "Three days of talks, labs and demos.",
        "image": "/images/event1.png",
        "venue": "Moscone Center",
        "location": "San Francisco, CA, USA",
        "date": "October 25, 2026",
        "time": "09:00 AM",
        "mode": "hybrid",
        "audience": "Developers, architects, ML engineers",
        "agenda": ["Keynote", " Breakout sessions ", "Networking"],
        "organizer": "Google Cloud",
        "tags": ["cloud", "ai", "devops"],
    }


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with make_sessionmaker(test_engine)() as session:
        yield session
