"""Todo repository for database operations."""

from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends
from sqlalchemy import func, select

from audittables.api.dependencies import DBSession
from audittables.core.database.errors import storage_errors
from audittables.modules.todos.models import Todo


class TodoRepository:
    """Repository for Todo database operations.

    Handles all database interactions for the Todo model. It knows
    nothing about auditing; the service records changes.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, todo: Todo) -> Todo:
        """Create a new todo.

        Args:
            todo: Todo instance to create

        Returns:
            The created todo with ID and timestamps populated
        """
        self.session.add(todo)
        with storage_errors("todo_create"):
            await self.session.flush()
            await self.session.refresh(todo)
        return todo

    async def get_by_id(self, todo_id: int, for_update: bool = False) -> Todo | None:
        """Get a todo by ID.

        Args:
            todo_id: The todo's ID
            for_update: Lock the row until the transaction ends, on
                dialects that support row locks

        Returns:
            Todo if found, None otherwise
        """
        stmt = select(Todo).where(Todo.id == todo_id)
        if for_update:
            stmt = stmt.with_for_update()
        with storage_errors("todo_get"):
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many(self, todo_ids: Sequence[int], for_update: bool = False) -> list[Todo]:
        """Get several todos by ID, ordered by ID.

        Rows are locked in ID order so concurrent batches cannot
        deadlock on each other.

        Args:
            todo_ids: IDs to fetch
            for_update: Lock the rows until the transaction ends

        Returns:
            The todos that exist; missing IDs are omitted
        """
        stmt = select(Todo).where(Todo.id.in_(todo_ids)).order_by(Todo.id)
        if for_update:
            stmt = stmt.with_for_update()
        with storage_errors("todo_get_many"):
            result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_all(
        self,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Todo], int]:
        """List todos with pagination, oldest first.

        Args:
            page: Page number (1-indexed)
            page_size: Number of items per page

        Returns:
            Tuple of (todos list, total count)
        """
        count_stmt = select(func.count()).select_from(Todo)
        offset = (page - 1) * page_size
        stmt = select(Todo).order_by(Todo.id.asc()).offset(offset).limit(page_size)

        with storage_errors("todo_list"):
            total = (await self.session.execute(count_stmt)).scalar_one()
            result = await self.session.execute(stmt)

        return list(result.scalars().all()), total

    async def update(self, todo: Todo) -> Todo:
        """Update a todo.

        Args:
            todo: Todo instance with updated fields

        Returns:
            The updated todo
        """
        with storage_errors("todo_update"):
            await self.session.flush()
            await self.session.refresh(todo)
        return todo

    async def delete(self, todo: Todo) -> None:
        """Delete a todo.

        Args:
            todo: Todo instance to delete
        """
        with storage_errors("todo_delete"):
            await self.session.delete(todo)
            await self.session.flush()


# Type alias for dependency injection
TodoRepo = Annotated[TodoRepository, Depends(TodoRepository)]
