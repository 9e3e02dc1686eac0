"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError("Todo not found", resource="todo", resource_id="42")
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when there's a conflict with existing data.

    Example:
        raise ConflictError("Todo already exists", details={"id": 1})
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class RevisionConflictError(ConflictError):
    """Raised when an audit write would break revision ordering.

    Covers a revision number that collides with, or is not greater than,
    the entity's latest recorded revision, and change kinds that do not
    follow ADD, MODIFY..., DELETE. This signals a sequencing bug; the
    unit of work must be aborted and not retried.
    """

    message = "Revision number conflicts with the audit log"
    error_code = "revision_conflict"

    def __init__(
        self,
        message: str | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
        revision_number: int | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if entity_type:
            details["entity_type"] = entity_type
        if entity_id:
            details["entity_id"] = entity_id
        if revision_number is not None:
            details["revision_number"] = revision_number
        super().__init__(message=message, details=details, **kwargs)


class AuditSerializationError(AppException):
    """Raised when an entity snapshot cannot be stored as JSON."""

    message = "Entity snapshot could not be serialized"
    error_code = "audit_serialization_failed"
    status_code = 500


class ServiceUnavailableError(AppException):
    """Raised when a required service is unavailable.

    Example:
        raise ServiceUnavailableError("Database connection failed")
    """

    message = "Service temporarily unavailable"
    error_code = "service_unavailable"
    status_code = 503


class StorageError(ServiceUnavailableError):
    """Raised when the underlying database cannot complete an operation.

    Covers lost connections, lock and pool timeouts. Callers decide
    whether to retry; the current unit of work is always rolled back.
    """

    message = "Storage is unavailable"
    error_code = "storage_unavailable"
