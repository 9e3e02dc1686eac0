"""Read-only queries over the revision audit log."""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from audittables.core.audit.models import AuditRecord, ChangeKind, Revision
from audittables.core.audit.unit_of_work import entity_type_of
from audittables.core.database.errors import storage_errors
from audittables.core.errors import NotFoundError


@dataclass(frozen=True)
class RevisionPage:
    """One page of an entity's revision history, oldest first."""

    items: list[AuditRecord]
    total: int
    page_offset: int
    page_size: int

    @property
    def has_next(self) -> bool:
        return (self.page_offset + 1) * self.page_size < self.total


class AuditQueryService:
    """Revision history for one audited model.

    All history is read in ascending revision order. Records are
    append-only, so a page or a full history fetched earlier stays
    valid when newer revisions are added later.

    Usage:
        history = AuditQueryService(session, Todo)
        latest = await history.find_last_revision(todo_id)
    """

    def __init__(self, session: AsyncSession, model: type[Any]) -> None:
        self.session = session
        self.model = model
        self.entity_type = entity_type_of(model)

    def _entity_filter(self, entity_id: Any) -> tuple[Any, ...]:
        return (
            AuditRecord.entity_type == self.entity_type,
            AuditRecord.entity_id == str(entity_id),
        )

    def _not_found(self, entity_id: Any, revision_number: int | None = None) -> NotFoundError:
        details = {"revision_number": revision_number} if revision_number is not None else {}
        return NotFoundError(
            "Revision not found",
            resource=self.entity_type,
            resource_id=str(entity_id),
            details=details,
        )

    async def find_last_revision(self, entity_id: Any) -> AuditRecord:
        """Get the newest audit record for an entity.

        Raises:
            NotFoundError: If the entity has no history
        """
        stmt = (
            select(AuditRecord)
            .where(*self._entity_filter(entity_id))
            .order_by(AuditRecord.revision_number.desc())
            .limit(1)
        )
        with storage_errors("audit_find_last"):
            result = await self.session.execute(stmt)
        record = result.scalar_one_or_none()
        if record is None:
            raise self._not_found(entity_id)
        return record

    async def find_all_revisions(self, entity_id: Any) -> list[AuditRecord]:
        """Get the complete history of an entity, oldest first.

        Returns an empty list for an entity with no history.
        """
        stmt = (
            select(AuditRecord)
            .where(*self._entity_filter(entity_id))
            .order_by(AuditRecord.revision_number.asc())
        )
        with storage_errors("audit_find_all"):
            result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_revisions_paged(
        self,
        entity_id: Any,
        page_size: int,
        page_offset: int = 0,
    ) -> RevisionPage:
        """Get one page of an entity's history, oldest first.

        Args:
            entity_id: The entity's primary key
            page_size: Number of records per page (at least 1)
            page_offset: Zero-based page index

        Returns:
            The requested page and the total record count
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        if page_offset < 0:
            raise ValueError("page_offset must not be negative")

        count_stmt = (
            select(func.count())
            .select_from(AuditRecord)
            .where(*self._entity_filter(entity_id))
        )
        stmt = (
            select(AuditRecord)
            .where(*self._entity_filter(entity_id))
            .order_by(AuditRecord.revision_number.asc())
            .offset(page_offset * page_size)
            .limit(page_size)
        )
        with storage_errors("audit_find_paged"):
            total = (await self.session.execute(count_stmt)).scalar_one()
            result = await self.session.execute(stmt)

        return RevisionPage(
            items=list(result.scalars().all()),
            total=total,
            page_offset=page_offset,
            page_size=page_size,
        )

    async def find_revision(self, entity_id: Any, revision_number: int) -> AuditRecord:
        """Get the audit record of an entity at an exact revision.

        Raises:
            NotFoundError: If the entity did not change in that revision
        """
        stmt = select(AuditRecord).where(
            *self._entity_filter(entity_id),
            AuditRecord.revision_number == revision_number,
        )
        with storage_errors("audit_find_revision"):
            result = await self.session.execute(stmt)
        record = result.scalar_one_or_none()
        if record is None:
            raise self._not_found(entity_id, revision_number)
        return record

    async def find_entity_at_revision(
        self, entity_id: Any, revision_number: int
    ) -> AuditRecord:
        """Get the record describing an entity's state as of a revision.

        This is the latest record at or before ``revision_number``.

        Raises:
            NotFoundError: If the entity did not exist yet, or had been
                deleted, at that revision
        """
        stmt = (
            select(AuditRecord)
            .where(
                *self._entity_filter(entity_id),
                AuditRecord.revision_number <= revision_number,
            )
            .order_by(AuditRecord.revision_number.desc())
            .limit(1)
        )
        with storage_errors("audit_find_at_revision"):
            result = await self.session.execute(stmt)
        record = result.scalar_one_or_none()
        if record is None or record.change_kind is ChangeKind.DELETE:
            raise self._not_found(entity_id, revision_number)
        return record


async def find_revision_changes(
    session: AsyncSession, revision_number: int
) -> tuple[Revision, list[AuditRecord]]:
    """Get a revision and every audit record written under it.

    Records span all audited models and are ordered by entity type
    and id.

    Raises:
        NotFoundError: If the revision does not exist
    """
    with storage_errors("audit_find_revision_changes"):
        revision = await session.get(Revision, revision_number)
        if revision is None:
            raise NotFoundError(
                "Revision not found",
                resource="revision",
                resource_id=str(revision_number),
            )
        stmt = (
            select(AuditRecord)
            .where(AuditRecord.revision_number == revision_number)
            .order_by(AuditRecord.entity_type, AuditRecord.entity_id)
        )
        result = await session.execute(stmt)
    return revision, list(result.scalars().all())
