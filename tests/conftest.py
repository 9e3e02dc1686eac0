"""Pytest configuration and shared fixtures."""

import os


# Settings are read at import time; point them at SQLite before the app loads
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATABASE_CREATE_SCHEMA", "false")
os.environ.setdefault("ENVIRONMENT", "testing")

from collections.abc import AsyncGenerator  # noqa: E402
from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool  # noqa: E402

# Import all models to ensure they're registered with Base.metadata
from audittables.core.audit.models import AuditRecord, Revision  # noqa: E402, F401
from audittables.core.database import (  # noqa: E402
    Base,
    create_session_factory,
    get_db,
    session_scope,
)
from audittables.main import create_app  # noqa: E402
from audittables.modules.todos.models import Todo  # noqa: E402
from tests.factories import TodoCreateFactory  # noqa: E402


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine backed by a fresh SQLite file.

    A file (rather than ``:memory:``) gives every session its own
    connection, so concurrent transactions behave like they would
    against a real server.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'audittables.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 30},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's."""
    return create_session_factory(engine)


@pytest.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests.

    Changes are flushed, never committed; the session is rolled back
    when the test completes.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def app(session_factory: async_sessionmaker[AsyncSession]):
    """Create test application instance.

    Each request gets its own committed-or-rolled-back session, the
    same unit-of-work behaviour as production.
    """
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_scope(session_factory) as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"


# ============================================================
# Todo Fixtures
# ============================================================


@pytest.fixture
async def todo(db: AsyncSession) -> Todo:
    """Create a todo directly, bypassing the audit log.

    Returns:
        A persisted (flushed) Todo instance
    """
    data = TodoCreateFactory.build()
    todo = Todo(description=data.description, completed=data.completed)
    db.add(todo)
    await db.flush()
    await db.refresh(todo)
    return todo
