"""Shared test fixtures.

Tests run against a throwaway SQLite file (aiosqlite) with the schema built
from the ORM metadata. Redis is left uninitialized: rate limiting fails
open and coin events are not published.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from verdict_path.config import get_settings
from verdict_path.database import close_db, get_engine, get_session, init_db
from verdict_path.db.base import Base
from verdict_path.db import models  # noqa: F401
from verdict_path.litigation.reward_table import RewardTable, build_reward_table
from verdict_path.main import create_app
from verdict_path.users.service import create_user


@pytest.fixture
def database_url(tmp_path, monkeypatch) -> str:
    url = f"sqlite+aiosqlite:///{tmp_path / 'verdict_path_test.db'}"
    monkeypatch.setenv("VP_DATABASE_URL", url)
    monkeypatch.setenv("VP_LOG_FORMAT", "console")
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def db_engine(database_url: str) -> AsyncGenerator[None, None]:
    """Initialize the engine and create all tables."""
    await init_db(database_url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """A direct database session for service calls and assertions."""
    async for session in get_session():
        yield session
        break


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Independent sessions, one per simulated concurrent request."""
    return async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def reward_table() -> RewardTable:
    return build_reward_table()


@pytest_asyncio.fixture
async def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[int]]:
    """Factory creating a committed user and returning its id."""

    async def _make(display_name: str = "Test Client") -> int:
        user = await create_user(db_session, display_name)
        await db_session.commit()
        return user.id

    return _make


@pytest_asyncio.fixture
async def client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against a fresh app (lifespan skipped; engine from db_engine)."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
