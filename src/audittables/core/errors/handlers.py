"""RFC 7807 Problem Details exception handlers.

Every error leaving the API, whether raised by a service, by request
validation or by the database driver, is rendered through
``problem_response`` so clients see one response shape.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from audittables.config import settings
from audittables.core.errors.exceptions import AppException, RevisionConflictError


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()


class FieldError(BaseModel):
    """Represents a single field validation error."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response schema.

    Attributes:
        type: URI reference identifying the problem type
        title: Short human-readable summary
        status: HTTP status code
        detail: Human-readable explanation specific to this occurrence
        instance: Path of the request that failed
        errors: Field-level errors, for validation failures only
        trace_id: Request ID, matching the X-Request-ID header
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def problem_response(
    request: Request,
    status_code: int,
    error_code: str,
    detail: str,
    errors: list[FieldError] | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    """Build a Problem Details response for the current request.

    Args:
        request: The failed request
        status_code: HTTP status to return
        error_code: Machine-readable code; becomes the type URI and title
        detail: Human-readable explanation
        errors: Field-level validation errors
        extra: Additional members; never overrides the standard ones
    """
    content: dict[str, Any] = ProblemDetail(
        type=f"{settings.api_docs_base_url}/errors/{error_code}",
        title=error_code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        instance=request.url.path,
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    ).model_dump(exclude_none=True)

    for key, value in (extra or {}).items():
        content.setdefault(key, value)

    return JSONResponse(status_code=status_code, content=content)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render domain exceptions.

    Server-side failures and revision conflicts, which mean the audit log
    was about to lose its ordering, are logged as errors; the rest are
    client mistakes.
    """
    server_fault = exc.status_code >= 500 or isinstance(exc, RevisionConflictError)
    log = logger.error if server_fault else logger.warning
    log(
        "app_exception",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
        details=exc.details,
    )
    return problem_response(
        request,
        exc.status_code,
        exc.error_code,
        exc.message,
        extra=exc.details,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures with one entry per bad field."""
    errors = [
        FieldError(
            field=".".join(str(part) for part in error.get("loc", ()) if part != "body")
            or "unknown",
            message=error.get("msg", "Invalid value"),
            type=error.get("type"),
        )
        for error in exc.errors()
    ]

    logger.warning("validation_error", path=request.url.path, error_count=len(errors))

    return problem_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed",
        errors=errors,
    )


async def storage_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render driver failures that were not translated by a repository.

    Reported as 503 so callers can apply their own retry policy.
    """
    logger.error(
        "storage_unavailable",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return problem_response(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "storage_unavailable",
        "Storage is unavailable",
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render anything unexpected as a 500 without leaking internals."""
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(
        AppException, cast("ExceptionHandler", app_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(OperationalError, storage_exception_handler)
    app.add_exception_handler(PoolTimeoutError, storage_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
