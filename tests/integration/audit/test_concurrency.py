"""Concurrent writers against the revision audit log."""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from audittables.core.audit.models import AuditRecord, ChangeKind, Revision
from audittables.core.audit.service import AuditQueryService
from audittables.modules.todos.models import Todo
from audittables.modules.todos.schemas import TodoCreate
from tests.factories import build_todo_service


async def create_in_own_transaction(
    session_factory: async_sessionmaker[AsyncSession], description: str
) -> tuple[int, int]:
    async with session_factory() as session:
        service = build_todo_service(session)
        todo = await service.create_todo(TodoCreate(description=description))
        await session.commit()
        return todo.id, service.audit.revision.id


class TestConcurrentWriters:
    """Separate transactions allocating revisions at the same time."""

    @pytest.mark.asyncio
    async def test_concurrent_creates_get_distinct_revisions(self, session_factory):
        """Verify concurrent transactions never share a revision number."""
        results = await asyncio.gather(
            *(create_in_own_transaction(session_factory, f"todo {i}") for i in range(8))
        )

        todo_ids = [todo_id for todo_id, _ in results]
        numbers = [number for _, number in results]
        assert len(set(todo_ids)) == 8
        assert len(set(numbers)) == 8

    @pytest.mark.asyncio
    async def test_concurrent_creates_each_have_one_add(self, session_factory):
        """Verify every committed todo has exactly one ADD record."""
        results = await asyncio.gather(
            *(create_in_own_transaction(session_factory, f"todo {i}") for i in range(5))
        )

        async with session_factory() as session:
            history = AuditQueryService(session, Todo)
            for todo_id, number in results:
                records = await history.find_all_revisions(todo_id)
                assert [r.change_kind for r in records] == [ChangeKind.ADD]
                assert records[0].revision_number == number

            revision_count = (
                await session.execute(select(func.count()).select_from(Revision))
            ).scalar_one()
            record_count = (
                await session.execute(select(func.count()).select_from(AuditRecord))
            ).scalar_one()

        assert revision_count == 5
        assert record_count == 5

    @pytest.mark.asyncio
    async def test_rolled_back_transaction_leaves_no_history(self, session_factory):
        """Verify a rolled-back write leaves neither todo nor audit record."""
        async with session_factory() as session:
            service = build_todo_service(session)
            todo = await service.create_todo(TodoCreate(description="discarded"))
            todo_id = todo.id
            await session.rollback()

        async with session_factory() as session:
            assert await session.get(Todo, todo_id) is None
            assert await AuditQueryService(session, Todo).find_all_revisions(todo_id) == []
