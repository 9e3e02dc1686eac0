"""Snapshot serialization for audit records."""

import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import inspect

from audittables.core.errors import AuditSerializationError


def _serialize_value(value: Any) -> Any:
    """Serialize a value to JSON-compatible primitives.

    Recursively converts non-JSON-serializable types to their
    string or primitive representations.

    Args:
        value: Any value to serialize

    Returns:
        JSON-serializable representation of the value
    """
    # Pass through JSON primitives
    if value is None or isinstance(value, str | int | float | bool):
        return value

    result: Any
    if isinstance(value, UUID):
        result = str(value)
    elif isinstance(value, datetime | date):
        result = value.isoformat()
    elif isinstance(value, Decimal):
        result = str(value)
    elif isinstance(value, Enum):
        result = value.value
    elif isinstance(value, dict):
        result = {str(k): _serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list | tuple | set | frozenset):
        result = [_serialize_value(item) for item in value]
    elif isinstance(value, bytes):
        result = value.hex()
    else:
        # Fallback: convert to string
        result = str(value)

    return result


def take_snapshot(obj: Any) -> dict[str, Any]:
    """Capture every mapped column of a model instance.

    Relationships are not followed; a snapshot describes one row.
    Attributes must already be loaded (flush and refresh first).

    Args:
        obj: SQLAlchemy model instance

    Returns:
        Dictionary of column key to raw value
    """
    mapper = inspect(obj.__class__)
    return {attr.key: getattr(obj, attr.key) for attr in mapper.column_attrs}


def serialize_snapshot(snapshot: dict[str, Any]) -> dict[str, Any]:
    """Normalize a snapshot to strict JSON.

    Args:
        snapshot: Raw field values

    Returns:
        Snapshot containing only JSON primitives

    Raises:
        AuditSerializationError: If the snapshot is not a mapping or holds
            values that strict JSON cannot represent (NaN, Infinity)
    """
    if not isinstance(snapshot, dict):
        raise AuditSerializationError(
            details={"reason": f"snapshot must be a mapping, got {type(snapshot).__name__}"}
        )

    serialized = _serialize_value(snapshot)
    try:
        json.dumps(serialized, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise AuditSerializationError(details={"reason": str(exc)}) from exc

    return serialized
