"""Revision audit log for tracking entity changes.

Provides:
- Revision and AuditRecord models (append-only)
- RevisionSequencer for allocating revision numbers
- AuditRecorder for appending snapshot records
- AuditUnitOfWork, the explicit hook services call after each write
- AuditQueryService for reading revision history
"""

from audittables.core.audit.models import AuditRecord, ChangeKind, Revision
from audittables.core.audit.recorder import AuditRecorder
from audittables.core.audit.sequencer import RevisionSequencer
from audittables.core.audit.service import (
    AuditQueryService,
    RevisionPage,
    find_revision_changes,
)
from audittables.core.audit.unit_of_work import AuditUnitOfWork, UnitOfWork


__all__ = [
    "AuditQueryService",
    "AuditRecord",
    "AuditRecorder",
    "AuditUnitOfWork",
    "ChangeKind",
    "Revision",
    "RevisionPage",
    "RevisionSequencer",
    "UnitOfWork",
    "find_revision_changes",
]
