"""
database.py — async engine, session factory and the per-request session.

Only this module creates engines or sessions. Tests replace get_db with a
session bound to an in-memory SQLite database via dependency_overrides.
"""
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from voltmap.config import settings


class Base(DeclarativeBase):
    """Metadata root for voltmap.models; alembic/env.py imports it from here."""


async_engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)

# Route handlers serialize ORM rows after the commit, so keep them loaded.
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One transaction per request.

    store.py only flushes; the session is committed here on success and rolled
    back on any exception, so ending a charging session (session row + user
    totals) or claiming a reward (debit + claim row) lands all-or-nothing.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
