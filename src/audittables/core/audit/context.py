"""Request-scoped audit context.

Set by the request middleware and read when a revision is allocated,
so each revision remembers which request produced it.
"""

from contextvars import ContextVar
from typing import Any


# ContextVar for async-safe audit context storage
# Each async task/request gets its own isolated context
_audit_context: ContextVar[dict[str, Any] | None] = ContextVar(
    "audit_context", default=None
)


def set_audit_context(request_id: str | None = None) -> None:
    """Set the audit context for the current request.

    Args:
        request_id: Request correlation ID
    """
    _audit_context.set({"request_id": request_id})


def clear_audit_context() -> None:
    """Clear the audit context after request completes."""
    _audit_context.set(None)


def get_audit_context() -> dict[str, Any]:
    """Get the current audit context.

    Returns:
        Shallow copy of current audit context dict, or empty dict if not set
    """
    ctx = _audit_context.get()
    if ctx is None:
        return {}
    return ctx.copy()
