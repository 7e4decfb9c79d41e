"""Database configuration and session management."""

import re
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from config import Settings

# Base class for declarative models
Base = declarative_base()


def _sqlite_regexp(pattern: str, value: str | None) -> bool:
    """Back SQLite's REGEXP operator (case-insensitive, like PostgreSQL's ~*)."""
    if value is None:
        return False
    return re.search(pattern, value, re.IGNORECASE) is not None


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database.

    SQLite has no built-in REGEXP implementation, so one is registered on
    every new connection; the email check constraint depends on it.
    """
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DB_ECHO,
    )

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _register_regexp(dbapi_connection, connection_record):
            dbapi_connection.create_function("regexp", 2, _sqlite_regexp, deterministic=True)

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Dependency function to get database session.

    Sessions come from the factory the app was built with (``app.state``).

    Yields:
        AsyncSession: Database session
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(engine: AsyncEngine) -> None:
    """
    Initialize database (create tables).
    This should be called on application startup.
    """
    # Models must be registered on Base.metadata before create_all
    import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """
    Close database connections.
    This should be called on application shutdown.
    """
    await engine.dispose()
