"""Error handling module with RFC 7807 Problem Details."""

from audittables.core.errors.exceptions import (
    AppException,
    AuditSerializationError,
    ConflictError,
    NotFoundError,
    RevisionConflictError,
    ServiceUnavailableError,
    StorageError,
)
from audittables.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "AuditSerializationError",
    "ConflictError",
    # Handlers
    "FieldError",
    "NotFoundError",
    "ProblemDetail",
    "RevisionConflictError",
    "ServiceUnavailableError",
    "StorageError",
    "register_exception_handlers",
]
