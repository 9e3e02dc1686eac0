"""Todo service for business logic.

Every mutating method writes the todo first, then records the change
through the audit unit of work. Both happen in the request's session
transaction, so a failed audit write rolls back the todo write too.
"""

from collections.abc import Sequence
from typing import Annotated

import structlog
from fastapi import Depends

from audittables.core.audit.serialization import take_snapshot
from audittables.core.audit.unit_of_work import UnitOfWork
from audittables.core.errors import NotFoundError
from audittables.modules.todos.models import Todo
from audittables.modules.todos.repos import TodoRepo
from audittables.modules.todos.schemas import TodoCreate, TodoUpdate


log = structlog.get_logger()


class TodoService:
    """Service for todo management operations.

    Contains business logic for todo CRUD operations and batch
    completion. Reads never touch the audit log.
    """

    def __init__(self, repo: TodoRepo, audit: UnitOfWork) -> None:
        self.repo = repo
        self.audit = audit

    async def _get_for_update(self, todo_id: int) -> Todo:
        todo = await self.repo.get_by_id(todo_id, for_update=True)
        if not todo:
            raise NotFoundError(
                "Todo not found",
                resource="todo",
                resource_id=str(todo_id),
            )
        return todo

    async def create_todo(self, data: TodoCreate) -> Todo:
        """Create a new todo and record it as ADD.

        Args:
            data: Todo creation data

        Returns:
            The created todo
        """
        todo = await self.repo.create(
            Todo(description=data.description, completed=data.completed)
        )
        record = await self.audit.added(todo)

        log.info("todo_created", todo_id=todo.id, revision_number=record.revision_number)
        return todo

    async def get_todo(self, todo_id: int) -> Todo:
        """Get a todo by ID.

        Args:
            todo_id: The todo's ID

        Returns:
            The todo

        Raises:
            NotFoundError: If todo not found
        """
        todo = await self.repo.get_by_id(todo_id)
        if not todo:
            raise NotFoundError(
                "Todo not found",
                resource="todo",
                resource_id=str(todo_id),
            )
        return todo

    async def list_todos(self, page: int = 1, page_size: int = 20) -> tuple[list[Todo], int]:
        """List todos.

        Args:
            page: Page number
            page_size: Items per page

        Returns:
            Tuple of (todos list, total count)
        """
        return await self.repo.list_all(page, page_size)

    async def update_todo(self, todo_id: int, data: TodoUpdate) -> Todo:
        """Update a todo and record it as MODIFY.

        A call that changes no field still records a revision, so every
        accepted update appears in the history.

        Args:
            todo_id: The todo's ID
            data: Update data; omitted fields are unchanged

        Returns:
            The updated todo

        Raises:
            NotFoundError: If todo not found
        """
        todo = await self._get_for_update(todo_id)

        if data.description is not None:
            todo.description = data.description
        if data.completed is not None:
            todo.completed = data.completed

        todo = await self.repo.update(todo)
        record = await self.audit.modified(todo)

        log.info("todo_updated", todo_id=todo.id, revision_number=record.revision_number)
        return todo

    async def delete_todo(self, todo_id: int) -> None:
        """Delete a todo and record its last state as DELETE.

        Args:
            todo_id: The todo's ID

        Raises:
            NotFoundError: If todo not found
        """
        todo = await self._get_for_update(todo_id)
        last_state = take_snapshot(todo)

        await self.repo.delete(todo)
        record = await self.audit.deleted(todo, last_state)

        log.info("todo_deleted", todo_id=todo_id, revision_number=record.revision_number)

    async def complete_todos(self, todo_ids: Sequence[int]) -> list[Todo]:
        """Mark several todos completed under a single revision.

        Either every todo is updated and audited, or none is.

        Args:
            todo_ids: IDs of the todos to complete, without duplicates

        Returns:
            The updated todos, ordered by ID

        Raises:
            NotFoundError: If any of the todos does not exist
        """
        todos = await self.repo.get_many(todo_ids, for_update=True)
        missing = sorted(set(todo_ids) - {todo.id for todo in todos})
        if missing:
            raise NotFoundError(
                "Todo not found",
                resource="todo",
                resource_id=",".join(str(todo_id) for todo_id in missing),
            )

        for todo in todos:
            todo.completed = True
            await self.repo.update(todo)
            await self.audit.modified(todo)

        revision = self.audit.revision
        log.info(
            "todos_completed",
            count=len(todos),
            revision_number=revision.id if revision else None,
        )
        return todos


# Type alias for dependency injection
TodoSvc = Annotated[TodoService, Depends(TodoService)]
