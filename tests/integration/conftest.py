"""Fixtures wiring real repositories and audit components together."""

from collections.abc import Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from audittables.core.audit.service import AuditQueryService
from audittables.modules.todos.models import Todo
from audittables.modules.todos.services import TodoService
from tests.factories import build_todo_service


@pytest.fixture
def new_service(db: AsyncSession) -> Callable[[], TodoService]:
    """Provide a factory for per-operation todo services."""
    return lambda: build_todo_service(db)


@pytest.fixture
def history(db: AsyncSession) -> AuditQueryService:
    """Provide an audit query service scoped to todos."""
    return AuditQueryService(db, Todo)
