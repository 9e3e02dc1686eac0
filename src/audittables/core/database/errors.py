"""Translation of driver-level failures into domain errors."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from audittables.core.errors import StorageError


log = structlog.get_logger()


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Re-raise connection, lock and pool failures as StorageError.

    Integrity violations pass through untouched so callers can map
    them to their own conflict errors.

    Usage:
        with storage_errors("todo_create"):
            await session.flush()
    """
    try:
        yield
    except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
        log.error("storage_failure", operation=operation, error_type=type(exc).__name__)
        raise StorageError(details={"operation": operation}) from exc
