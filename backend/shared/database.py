"""
Database engine and session factory.

Provides a cached async SQLAlchemy engine and session factory, plus helpers
used at startup (schema creation) and by the readiness probe.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from .config import get_settings


class Base(DeclarativeBase):
    """Declarative base for all ORM tables."""

    pass


# Module-level caches
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a stored timestamp to aware UTC.

    Some drivers (SQLite) hand back naive datetimes even for
    timezone-aware columns; those values were written as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_engine() -> AsyncEngine:
    """
    Get the async engine for the configured database URL.

    Returns:
        Cached AsyncEngine instance
    """
    global _engine

    if _engine is None:
        settings = get_settings()
        if not settings.database_url:
            raise RuntimeError(
                "Database configuration missing. Set the DATABASE_URL environment variable."
            )
        _engine = create_async_engine(
            settings.database_url,
            echo=settings.database_echo,
            pool_pre_ping=True,
        )

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the cached session factory bound to the engine."""
    global _session_factory

    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)

    return _session_factory


async def init_db(engine: Optional[AsyncEngine] = None) -> None:
    """Create all tables that don't exist yet."""
    # Import tables so they register with Base.metadata
    from . import tables  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping_database() -> bool:
    """Return True if a trivial query succeeds."""
    async with get_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))
    return True


async def reset_engine() -> None:
    """
    Dispose of the cached engine and session factory.

    Useful for testing or when configuration changes.
    """
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
