"""Explicit audit hook for entity stores.

Services call ``AuditUnitOfWork`` right after each primary write. The
unit of work lives as long as the request's database session, so every
change made in one request shares a single revision number, and the
audit rows commit or roll back with the entity rows.
"""

from typing import Annotated, Any

from fastapi import Depends
from sqlalchemy import inspect

from audittables.core.audit.models import AuditRecord, ChangeKind, Revision
from audittables.core.audit.recorder import Recorder
from audittables.core.audit.sequencer import Sequencer
from audittables.core.audit.serialization import take_snapshot


def entity_type_of(model: type[Any]) -> str:
    """Return the audit entity type for a model class."""
    return model.__tablename__


def entity_key_of(obj: Any) -> str:
    """Return the string form of an instance's primary key."""
    identity = inspect(obj).identity
    if identity is None:
        raise ValueError(f"{obj!r} has no identity; flush it before auditing")
    return ":".join(str(part) for part in identity)


class AuditUnitOfWork:
    """Records entity changes under one lazily allocated revision."""

    def __init__(self, sequencer: Sequencer, recorder: Recorder) -> None:
        self.sequencer = sequencer
        self.recorder = recorder
        self._revision: Revision | None = None

    @property
    def revision(self) -> Revision | None:
        """The revision allocated so far, if any change was recorded."""
        return self._revision

    async def current_revision(self) -> Revision:
        """Allocate the unit's revision on first use, then reuse it."""
        if self._revision is None:
            self._revision = await self.sequencer.next_revision()
        return self._revision

    async def record(
        self,
        obj: Any,
        change_kind: ChangeKind,
        snapshot: dict[str, Any] | None = None,
    ) -> AuditRecord:
        """Record a change to a flushed entity.

        Args:
            obj: The audited model instance, already flushed
            change_kind: ADD, MODIFY or DELETE
            snapshot: Field values to store; taken from ``obj`` when omitted.
                Deletes pass the state captured before removal.

        Returns:
            The appended audit record

        Raises:
            TypeError: If the model is not marked with AuditedMixin
        """
        if not getattr(obj, "__audit__", False):
            raise TypeError(f"{type(obj).__name__} is not an audited model")

        if snapshot is None:
            snapshot = take_snapshot(obj)

        revision = await self.current_revision()
        return await self.recorder.record(
            entity_type=entity_type_of(type(obj)),
            entity_id=entity_key_of(obj),
            revision=revision,
            change_kind=change_kind,
            snapshot=snapshot,
        )

    async def added(self, obj: Any) -> AuditRecord:
        """Record creation of an entity."""
        return await self.record(obj, ChangeKind.ADD)

    async def modified(self, obj: Any) -> AuditRecord:
        """Record modification of an entity."""
        return await self.record(obj, ChangeKind.MODIFY)

    async def deleted(self, obj: Any, snapshot: dict[str, Any]) -> AuditRecord:
        """Record deletion of an entity, given its last state."""
        return await self.record(obj, ChangeKind.DELETE, snapshot)


# Type alias for dependency injection
UnitOfWork = Annotated[AuditUnitOfWork, Depends(AuditUnitOfWork)]
