"""Pydantic schemas for audit log responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from audittables.core.audit.models import ChangeKind


class AuditRecordResponse(BaseModel):
    """Schema for one audit record."""

    entity_type: str
    entity_id: str
    revision_number: int
    revision_timestamp: datetime
    change_kind: ChangeKind
    snapshot: dict[str, Any]

    model_config = ConfigDict(from_attributes=True)


class RevisionPageResponse(BaseModel):
    """Schema for a page of revision history."""

    items: list[AuditRecordResponse]
    total: int
    page_offset: int
    page_size: int
    has_next: bool

    model_config = ConfigDict(from_attributes=True)


class RevisionChangesResponse(BaseModel):
    """Schema for every change recorded under one revision."""

    revision_number: int
    created_at: datetime
    request_id: str | None = None
    changes: list[AuditRecordResponse]
