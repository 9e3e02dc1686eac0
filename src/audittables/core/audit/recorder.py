"""Append-only writer for audit records."""

from typing import Annotated, Any

import structlog
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from audittables.api.dependencies import DBSession
from audittables.core.audit.models import AuditRecord, ChangeKind, Revision
from audittables.core.audit.serialization import serialize_snapshot
from audittables.core.database.errors import storage_errors
from audittables.core.errors import RevisionConflictError


log = structlog.get_logger()


# Change kinds allowed to follow the entity's latest recorded kind.
# None means the entity has no history yet.
_ALLOWED_TRANSITIONS: dict[ChangeKind | None, frozenset[ChangeKind]] = {
    None: frozenset({ChangeKind.ADD}),
    ChangeKind.ADD: frozenset({ChangeKind.MODIFY, ChangeKind.DELETE}),
    ChangeKind.MODIFY: frozenset({ChangeKind.MODIFY, ChangeKind.DELETE}),
    ChangeKind.DELETE: frozenset(),
}


class AuditRecorder:
    """Appends audit records inside the caller's transaction.

    Records are never updated or deleted. Each append checks the
    entity's latest record first: the new revision must be strictly
    greater and the change kind must extend ADD, MODIFY..., DELETE.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def _latest(self, entity_type: str, entity_id: str) -> AuditRecord | None:
        stmt = (
            select(AuditRecord)
            .where(
                AuditRecord.entity_type == entity_type,
                AuditRecord.entity_id == entity_id,
            )
            .order_by(AuditRecord.revision_number.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def record(
        self,
        entity_type: str,
        entity_id: str,
        revision: Revision,
        change_kind: ChangeKind,
        snapshot: dict[str, Any],
    ) -> AuditRecord:
        """Append one audit record.

        Args:
            entity_type: Table name of the audited model
            entity_id: String form of the entity's primary key
            revision: Revision allocated for the current unit of work
            change_kind: ADD, MODIFY or DELETE
            snapshot: Field values of the entity at this revision

        Returns:
            The persisted audit record

        Raises:
            AuditSerializationError: If the snapshot is not strict JSON
            RevisionConflictError: If the revision collides with or precedes
                the entity's history, or the change kind is out of order
            StorageError: If the database is unavailable
        """
        payload = serialize_snapshot(snapshot)

        with storage_errors("audit_record"):
            latest = await self._latest(entity_type, entity_id)

        if latest is not None and latest.revision_number >= revision.id:
            raise RevisionConflictError(
                "Revision is not newer than the entity's latest audit record",
                entity_type=entity_type,
                entity_id=entity_id,
                revision_number=revision.id,
                details={"latest_revision_number": latest.revision_number},
            )

        latest_kind = latest.change_kind if latest is not None else None
        if change_kind not in _ALLOWED_TRANSITIONS[latest_kind]:
            raise RevisionConflictError(
                f"{change_kind.value} cannot follow "
                f"{latest_kind.value if latest_kind else 'an empty history'}",
                entity_type=entity_type,
                entity_id=entity_id,
                revision_number=revision.id,
            )

        entry = AuditRecord(
            entity_type=entity_type,
            entity_id=entity_id,
            revision=revision,
            change_kind=change_kind,
            snapshot=payload,
        )
        self.session.add(entry)

        try:
            with storage_errors("audit_record"):
                await self.session.flush()
        except IntegrityError as exc:
            raise RevisionConflictError(
                "Audit record already exists for this revision",
                entity_type=entity_type,
                entity_id=entity_id,
                revision_number=revision.id,
            ) from exc

        log.info(
            "audit_record_appended",
            entity_type=entity_type,
            entity_id=entity_id,
            revision_number=revision.id,
            change_kind=change_kind.value,
        )
        return entry


# Type alias for dependency injection
Recorder = Annotated[AuditRecorder, Depends(AuditRecorder)]
