"""Todo database models."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from audittables.core.constants import MAX_DESCRIPTION_LENGTH
from audittables.core.database.base import (
    AuditedMixin,
    Base,
    IntegerIDMixin,
    TimestampMixin,
)


class Todo(Base, IntegerIDMixin, TimestampMixin, AuditedMixin):
    """A todo item. Every change is recorded in the revision audit log.

    Ids are never reused, so the history of a deleted todo never mixes
    with a later one.

    Attributes:
        description: What needs doing
        completed: Whether it is done
    """

    __tablename__ = "todos"
    __table_args__ = {"sqlite_autoincrement": True}

    description: Mapped[str] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=False,
    )
    completed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Todo(id={self.id}, description={self.description!r}, completed={self.completed})>"
