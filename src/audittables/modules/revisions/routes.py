"""Revision API routes."""

from fastapi import APIRouter

from audittables.api.dependencies import DBSession, RowId
from audittables.core.audit.schemas import AuditRecordResponse, RevisionChangesResponse
from audittables.core.audit.service import find_revision_changes


router = APIRouter(prefix="/revisions", tags=["revisions"])


@router.get(
    "/{revision_number}",
    response_model=RevisionChangesResponse,
    summary="Changes in a revision",
)
async def get_revision_changes(
    revision_number: RowId, db: DBSession
) -> RevisionChangesResponse:
    """Every audit record written under one revision, across all entity types."""
    revision, records = await find_revision_changes(db, revision_number)
    return RevisionChangesResponse(
        revision_number=revision.id,
        created_at=revision.created_at,
        request_id=revision.request_id,
        changes=[AuditRecordResponse.model_validate(record) for record in records],
    )
