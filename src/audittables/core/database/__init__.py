"""Database layer - session management, base models, and mixins."""

from audittables.core.database.base import (
    AuditedMixin,
    Base,
    IntegerIDMixin,
    TimestampMixin,
)
from audittables.core.database.session import (
    async_engine,
    async_session_factory,
    create_engine,
    create_session_factory,
    get_db,
    session_scope,
)


__all__ = [
    "AuditedMixin",
    "Base",
    "IntegerIDMixin",
    "TimestampMixin",
    "async_engine",
    "async_session_factory",
    "create_engine",
    "create_session_factory",
    "get_db",
    "session_scope",
]
