"""
Async session management for SQLAlchemy.

Provides:
- Async engine and session factory
- Transaction scope used by the game service
- Lifecycle management (init_db, close_db)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.data.config import engine_kwargs_for, get_settings
from src.data.models import Base

logger = logging.getLogger(__name__)

# Global engine and session factory (initialized once)
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """
    Get the global async engine.

    Raises:
        RuntimeError: If engine not initialized (call init_db first)
    """
    if _engine is None:
        raise RuntimeError(
            "Database engine not initialized. Call init_db() first."
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get the global async session factory.

    Raises:
        RuntimeError: If session factory not initialized
    """
    if _async_session_factory is None:
        raise RuntimeError(
            "Session factory not initialized. Call init_db() first."
        )
    return _async_session_factory


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with the options every caller in the app relies on."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Snapshots are built after commit
        autoflush=False,  # Repository flushes explicitly after writes
    )


async def init_db(database_url: Optional[str] = None) -> None:
    """
    Initialize the database engine and session factory.

    This should be called once at application startup (e.g., in FastAPI lifespan).

    Args:
        database_url: Override for DATABASE_URL (tests, scripts)
    """
    global _engine, _async_session_factory

    settings = get_settings()
    url = database_url or settings.database_url
    logger.info(f"Initializing database connection: {url.split('@')[-1]}")

    _engine = create_async_engine(url, **engine_kwargs_for(url, settings))
    _async_session_factory = build_session_factory(_engine)

    logger.info("Database initialized successfully")


async def close_db() -> None:
    """
    Close the database engine and cleanup resources.

    This should be called at application shutdown (e.g., in FastAPI lifespan).
    """
    global _engine, _async_session_factory

    if _engine is not None:
        logger.info("Closing database connection")
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.info("Database connection closed")


async def create_tables() -> None:
    """
    Create all tables defined in Base.metadata.

    WARNING: This is for development only. In production, use Alembic migrations.
    """
    engine = get_engine()
    logger.warning("Creating tables directly (dev mode) - use Alembic in production!")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Tables created successfully")


async def drop_tables() -> None:
    """
    Drop all tables defined in Base.metadata.

    WARNING: This is destructive and for testing only!
    """
    engine = get_engine()
    logger.warning("Dropping all tables (testing mode)")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    logger.info("Tables dropped successfully")


@asynccontextmanager
async def session_scope(
    factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager for a single database transaction.

    Usage:
        async with session_scope() as session:
            room = await session.get(Room, room_id)
            ...

    Auto-commits on success, rolls back on exception.
    """
    factory = factory or get_session_factory()

    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
