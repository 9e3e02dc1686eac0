"""Integration tests for TodoRepository."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from audittables.modules.todos.models import Todo
from audittables.modules.todos.repos import TodoRepository


class TestTodoRepository:
    """Tests for TodoRepository against a real database."""

    @pytest.mark.asyncio
    async def test_create_populates_id_and_timestamps(self, db: AsyncSession):
        """Verify create assigns an id and server-side timestamps."""
        todo = await TodoRepository(db).create(Todo(description="write tests"))

        assert todo.id is not None
        assert todo.completed is False
        assert todo.created_at is not None
        assert todo.updated_at is not None

    @pytest.mark.asyncio
    async def test_get_by_id(self, db: AsyncSession, todo: Todo):
        """Verify a todo is found by id, with or without a row lock."""
        repo = TodoRepository(db)

        assert (await repo.get_by_id(todo.id)).id == todo.id
        assert (await repo.get_by_id(todo.id, for_update=True)).id == todo.id

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, db: AsyncSession):
        """Verify None for an unknown id."""
        assert await TodoRepository(db).get_by_id(999) is None

    @pytest.mark.asyncio
    async def test_get_many_orders_by_id_and_skips_missing(self, db: AsyncSession):
        """Verify get_many returns existing todos in id order."""
        repo = TodoRepository(db)
        first = await repo.create(Todo(description="first"))
        second = await repo.create(Todo(description="second"))

        todos = await repo.get_many([second.id, 999, first.id], for_update=True)

        assert [t.id for t in todos] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_list_all_paginates(self, db: AsyncSession):
        """Verify list_all pages oldest first and reports the total."""
        repo = TodoRepository(db)
        created = [await repo.create(Todo(description=f"todo {i}")) for i in range(5)]

        page_one, total = await repo.list_all(page=1, page_size=2)
        page_three, _ = await repo.list_all(page=3, page_size=2)

        assert total == 5
        assert [t.id for t in page_one] == [created[0].id, created[1].id]
        assert [t.id for t in page_three] == [created[4].id]

    @pytest.mark.asyncio
    async def test_update(self, db: AsyncSession, todo: Todo):
        """Verify changed fields are persisted."""
        repo = TodoRepository(db)
        todo.description = "changed"
        todo.completed = True

        updated = await repo.update(todo)

        assert updated.description == "changed"
        assert updated.completed is True

    @pytest.mark.asyncio
    async def test_delete(self, db: AsyncSession, todo: Todo):
        """Verify a deleted todo can no longer be fetched."""
        repo = TodoRepository(db)
        todo_id = todo.id

        await repo.delete(todo)

        assert await repo.get_by_id(todo_id) is None
