"""
Async engine and session factories.

The API uses the module-level ``async_session_maker``. The scheduler and the
CLI scripts build their own engine with ``create_engine`` so they can dispose
of it independently.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from core.config import settings


def create_engine(url: Optional[str] = None, echo: bool = False) -> AsyncEngine:
    return create_async_engine(url or settings.DATABASE_URL, echo=echo, poolclass=NullPool)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """Sessions keep loaded rows usable after commit; writes are flushed explicitly."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


engine = create_engine(echo=settings.ENVIRONMENT == "development")
async_session_maker = create_session_maker(engine)
