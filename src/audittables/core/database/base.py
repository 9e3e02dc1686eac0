"""SQLAlchemy declarative base and common mixins."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class IntegerIDMixin:
    """Mixin that adds an autoincrementing integer primary key.

    Models using this mixin should also set ``sqlite_autoincrement`` in
    ``__table_args__`` so that ids are never reused after a delete.
    """

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class AuditedMixin:
    """Marker mixin for models whose changes go to the revision audit log.

    The marker does not install any hook. Services write the audit
    record explicitly through ``AuditUnitOfWork`` in the same transaction
    as the primary write; the unit of work refuses models without it.

    Example:
        class Todo(Base, IntegerIDMixin, TimestampMixin, AuditedMixin):
            __tablename__ = "todos"
            description: Mapped[str] = mapped_column(String(255))
    """

    __audit__: bool = True
