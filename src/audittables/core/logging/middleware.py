"""Request tracing and access logging middleware."""

import time
import uuid
from collections.abc import Iterable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from audittables.core.audit.context import clear_audit_context, set_audit_context


logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Give every request a correlation ID.

    The ID comes from the ``X-Request-ID`` header when the client sends
    one, otherwise a UUID4 is generated. It is stored on
    ``request.state``, bound into structlog's context, placed in the
    audit context so the revision allocated for this request records
    it, and echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.trace_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)
        set_audit_context(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            clear_audit_context()
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one ``request_completed`` event per request.

    The level follows the status code: errors for 5xx, warnings for 4xx.
    Probe and docs paths are skipped. Must run inside
    ``RequestIdMiddleware`` so the request ID is already bound.
    """

    def __init__(self, app: ASGIApp, exclude_paths: Iterable[str] | None = None) -> None:
        super().__init__(app)
        self.exclude_paths = tuple(
            exclude_paths
            if exclude_paths is not None
            else ("/health/", "/docs", "/redoc", "/openapi.json")
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if path.startswith(self.exclude_paths):
            return await call_next(request)

        log = logger.bind(
            method=request.method,
            path=path,
            client_ip=request.client.host if request.client else None,
        )
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            log.exception("request_failed", duration_ms=_elapsed_ms(started))
            raise

        status_code = response.status_code
        if status_code >= 500:
            emit = log.error
        elif status_code >= 400:
            emit = log.warning
        else:
            emit = log.info
        emit("request_completed", status_code=status_code, duration_ms=_elapsed_ms(started))

        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
