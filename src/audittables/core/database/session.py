"""Async database session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from audittables.config import Settings, settings
from audittables.core.database.errors import storage_errors


def engine_options(config: Settings) -> dict[str, Any]:
    """Build engine keyword arguments for the configured backend.

    SQLite drivers do not use a sized connection pool, so the pool
    settings are only passed for PostgreSQL.
    """
    options: dict[str, Any] = {"echo": config.database_echo}
    if config.is_sqlite:
        options["connect_args"] = {"timeout": config.database_pool_timeout}
    else:
        options.update(
            pool_size=config.database_pool_size,
            max_overflow=config.database_max_overflow,
            pool_timeout=config.database_pool_timeout,
            pool_pre_ping=True,  # Verify connections before use
        )
    return options


def create_engine(config: Settings) -> AsyncEngine:
    """Create an async engine for the given settings."""
    return create_async_engine(config.async_database_url, **engine_options(config))


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Create async engine
async_engine = create_engine(settings)

# Create async session factory
async_session_factory = create_session_factory(async_engine)


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Open a session whose transaction is one unit of work.

    Entity writes and their audit records commit together, or the whole
    unit rolls back. A failed commit raises ``StorageError``.
    """
    async with factory() as session:
        try:
            yield session
            with storage_errors("commit"):
                await session.commit()
        except BaseException:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides the request's database session.

    Must be declared with ``scope="function"`` (see ``DBSession``) so the
    commit runs before the response is sent and its failure reaches the
    exception handlers.
    """
    async with session_scope(async_session_factory) as session:
        yield session
