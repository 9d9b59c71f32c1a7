"""
Pytest configuration and fixtures
"""

import pytest
import pytest_asyncio
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from typing import AsyncGenerator
from core.database import create_session_maker
from models.base import Base, Source, WorkType
from models.document import Document  # noqa: F401
from models.sync_run import SyncRun  # noqa: F401
from ingestion.loaders.document_store import DocumentStore
from schemas.post import Post

# Single shared in-memory database per test
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with create_session_maker(test_engine)() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store(db_session):
    return DocumentStore(db_session)


@pytest.fixture
def t0():
    """A fixed checkpoint time"""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_post():
    """Factory for posts with sensible defaults"""
    def _make(
        title="Song",
        artists=("Artist",),
        type=WorkType.TRACK,
        source=Source.PITCHFORK,
        date=None,
        url=None,
    ):
        return Post(
            source=source,
            url=url or f"https://example.com/{source.value}/{title.lower().replace(' ', '-')}",
            title=title,
            type=type,
            artists=list(artists),
            date=date,
        )
    return _make
