"""Todo API routes, including revision history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from audittables.api.dependencies import DBSession, Pagination, RowId
from audittables.config import settings
from audittables.core.audit.schemas import AuditRecordResponse, RevisionPageResponse
from audittables.core.audit.service import AuditQueryService
from audittables.modules.todos.models import Todo
from audittables.modules.todos.schemas import (
    TodoBatchComplete,
    TodoBatchResponse,
    TodoCreate,
    TodoListResponse,
    TodoResponse,
    TodoUpdate,
)
from audittables.modules.todos.services import TodoSvc


router = APIRouter(prefix="/todos", tags=["todos"])


def get_todo_history(db: DBSession) -> AuditQueryService:
    """Provide an audit query service scoped to todos."""
    return AuditQueryService(db, Todo)


TodoHistory = Annotated[AuditQueryService, Depends(get_todo_history)]


@router.post(
    "",
    response_model=TodoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create todo",
)
async def create_todo(data: TodoCreate, service: TodoSvc) -> Todo:
    """Create a todo. Recorded as an ADD revision."""
    return await service.create_todo(data)


@router.get(
    "",
    response_model=TodoListResponse,
    summary="List todos",
)
async def list_todos(service: TodoSvc, pagination: Pagination) -> TodoListResponse:
    """List current todos, oldest first."""
    todos, total = await service.list_todos(pagination.page, pagination.page_size)
    return TodoListResponse(
        items=[TodoResponse.model_validate(todo) for todo in todos],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.post(
    "/complete",
    response_model=TodoBatchResponse,
    summary="Complete several todos",
)
async def complete_todos(
    data: TodoBatchComplete, service: TodoSvc
) -> TodoBatchResponse:
    """Mark todos completed. All changes share one revision."""
    todos = await service.complete_todos(data.ids)
    revision = service.audit.revision
    return TodoBatchResponse(
        revision_number=revision.id if revision else None,
        items=[TodoResponse.model_validate(todo) for todo in todos],
    )


@router.get(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Get todo",
)
async def get_todo(todo_id: RowId, service: TodoSvc) -> Todo:
    """Get the current state of a todo."""
    return await service.get_todo(todo_id)


@router.put(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Update todo",
)
async def update_todo(todo_id: RowId, data: TodoUpdate, service: TodoSvc) -> Todo:
    """Update a todo. Recorded as a MODIFY revision."""
    return await service.update_todo(todo_id, data)


@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete todo",
)
async def delete_todo(todo_id: RowId, service: TodoSvc) -> Response:
    """Delete a todo. Recorded as a DELETE revision; history is kept."""
    await service.delete_todo(todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{todo_id}/history",
    response_model=list[AuditRecordResponse],
    summary="Full revision history",
)
async def get_history(todo_id: RowId, history: TodoHistory) -> list[AuditRecordResponse]:
    """Every revision of a todo, oldest first. Empty if it never existed."""
    records = await history.find_all_revisions(todo_id)
    return [AuditRecordResponse.model_validate(record) for record in records]


@router.get(
    "/{todo_id}/revisions",
    response_model=RevisionPageResponse,
    summary="Paged revision history",
)
async def list_revisions(
    todo_id: RowId,
    history: TodoHistory,
    page_offset: Annotated[int, Query(ge=0)] = 0,
    page_size: Annotated[int | None, Query(ge=1)] = None,
) -> RevisionPageResponse:
    """One page of a todo's revisions, oldest first. ``page_offset`` is zero-based."""
    size = min(page_size or settings.default_page_size, settings.max_page_size)
    page = await history.find_revisions_paged(todo_id, size, page_offset)
    return RevisionPageResponse.model_validate(page)


@router.get(
    "/{todo_id}/revisions/latest",
    response_model=AuditRecordResponse,
    summary="Latest revision",
)
async def get_latest_revision(todo_id: RowId, history: TodoHistory) -> AuditRecordResponse:
    """The newest revision of a todo."""
    record = await history.find_last_revision(todo_id)
    return AuditRecordResponse.model_validate(record)


@router.get(
    "/{todo_id}/revisions/{revision_number}",
    response_model=AuditRecordResponse,
    summary="Specific revision",
)
async def get_revision(
    todo_id: RowId, revision_number: RowId, history: TodoHistory
) -> AuditRecordResponse:
    """The record of a todo at an exact revision."""
    record = await history.find_revision(todo_id, revision_number)
    return AuditRecordResponse.model_validate(record)


@router.get(
    "/{todo_id}/revisions/{revision_number}/state",
    response_model=AuditRecordResponse,
    summary="State as of a revision",
)
async def get_state_at_revision(
    todo_id: RowId, revision_number: RowId, history: TodoHistory
) -> AuditRecordResponse:
    """The todo as it was when ``revision_number`` was committed."""
    record = await history.find_entity_at_revision(todo_id, revision_number)
    return AuditRecordResponse.model_validate(record)
