"""Revision audit log database models.

A ``Revision`` is one committed change-set; every entity touched in that
change-set gets one ``AuditRecord`` tagged with the revision's number.
Both tables are append-only.
"""

import enum
from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from audittables.core.constants import (
    MAX_CHANGE_KIND_LENGTH,
    MAX_ENTITY_ID_LENGTH,
    MAX_ENTITY_TYPE_LENGTH,
    MAX_REQUEST_ID_LENGTH,
)
from audittables.core.database.base import Base, IntegerIDMixin


class ChangeKind(str, enum.Enum):
    """Classification of an audited change."""

    ADD = "ADD"
    MODIFY = "MODIFY"
    DELETE = "DELETE"


class Revision(Base, IntegerIDMixin):
    """One change-set in the audit log.

    The primary key is the revision number. It is generated by the
    database, so concurrent transactions never share a number, and
    committed numbers are never reused.

    Attributes:
        id: The revision number
        request_id: Correlation ID of the request that produced it
        created_at: When the revision was allocated
    """

    __tablename__ = "revisions"
    __table_args__ = {"sqlite_autoincrement": True}

    request_id: Mapped[str | None] = mapped_column(
        String(MAX_REQUEST_ID_LENGTH),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Revision(id={self.id}, request_id={self.request_id})>"


class AuditRecord(Base, IntegerIDMixin):
    """Immutable snapshot of one entity at one revision.

    Attributes:
        entity_type: Table name of the audited model (e.g. "todos")
        entity_id: String form of the entity's primary key. Not a foreign
            key: records outlive the entities they describe.
        revision_number: The revision this change belongs to
        change_kind: ADD, MODIFY or DELETE
        snapshot: Every column value of the entity at this revision
    """

    __tablename__ = "audit_records"
    __table_args__ = (
        UniqueConstraint(
            "entity_type",
            "entity_id",
            "revision_number",
            name="uq_audit_records_entity_revision",
        ),
        Index("ix_audit_records_revision_number", "revision_number"),
        {"sqlite_autoincrement": True},
    )

    entity_type: Mapped[str] = mapped_column(
        String(MAX_ENTITY_TYPE_LENGTH),
        nullable=False,
    )
    entity_id: Mapped[str] = mapped_column(
        String(MAX_ENTITY_ID_LENGTH),
        nullable=False,
    )
    revision_number: Mapped[int] = mapped_column(
        ForeignKey("revisions.id", ondelete="RESTRICT"),
        nullable=False,
    )
    change_kind: Mapped[ChangeKind] = mapped_column(
        Enum(
            ChangeKind,
            native_enum=False,
            length=MAX_CHANGE_KIND_LENGTH,
            name="change_kind",
        ),
        nullable=False,
    )
    snapshot: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
    )

    revision: Mapped[Revision] = relationship(
        Revision,
        lazy="joined",
    )

    @property
    def revision_timestamp(self) -> datetime:
        return self.revision.created_at

    def __repr__(self) -> str:
        return (
            f"<AuditRecord(entity_type={self.entity_type}, entity_id={self.entity_id}, "
            f"revision_number={self.revision_number}, change_kind={self.change_kind.value})>"
        )
