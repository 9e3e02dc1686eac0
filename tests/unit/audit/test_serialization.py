"""Tests for audit snapshot serialization utilities."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

import pytest

from audittables.core.audit.serialization import (
    _serialize_value,
    serialize_snapshot,
    take_snapshot,
)
from audittables.core.errors import AuditSerializationError
from audittables.modules.todos.models import Todo


class SampleEnum(Enum):
    """Sample enum for serialization tests."""

    VALUE_A = "a"
    VALUE_B = 42


class TestSerializeValue:
    """Tests for _serialize_value function."""

    def test_serialize_primitives(self):
        """Verify JSON primitives pass through unchanged."""
        assert _serialize_value(None) is None
        assert _serialize_value("hello") == "hello"
        assert _serialize_value(42) == 42
        assert _serialize_value(3.14) == 3.14
        assert _serialize_value(True) is True

    def test_serialize_uuid(self):
        """Verify UUID is converted to string."""
        test_uuid = uuid4()
        assert _serialize_value(test_uuid) == str(test_uuid)

    def test_serialize_datetime_and_date(self):
        """Verify datetime and date are converted to ISO format."""
        assert _serialize_value(datetime(2024, 1, 15, 10, 30, 45)) == "2024-01-15T10:30:45"
        assert _serialize_value(date(2024, 1, 15)) == "2024-01-15"

    def test_serialize_decimal(self):
        """Verify Decimal is converted to string."""
        assert _serialize_value(Decimal("123.45")) == "123.45"

    def test_serialize_enum(self):
        """Verify Enum is converted to its value."""
        assert _serialize_value(SampleEnum.VALUE_A) == "a"
        assert _serialize_value(SampleEnum.VALUE_B) == 42

    def test_serialize_containers(self):
        """Verify containers are serialized recursively to dicts and lists."""
        test_uuid = uuid4()
        data = {"ids": (test_uuid,), "nested": {"tags": ["a", "b"]}, 1: "int key"}

        result = _serialize_value(data)

        assert result == {
            "ids": [str(test_uuid)],
            "nested": {"tags": ["a", "b"]},
            "1": "int key",
        }

    def test_serialize_bytes(self):
        """Verify bytes are hex encoded."""
        assert _serialize_value(b"\x01\xff") == "01ff"

    def test_serialize_unknown_type_converts_to_string(self):
        """Verify unknown types are converted to string."""

        class CustomClass:
            def __str__(self):
                return "custom_object"

        assert _serialize_value(CustomClass()) == "custom_object"


class TestTakeSnapshot:
    """Tests for take_snapshot."""

    def test_snapshot_contains_every_column(self):
        """Verify all mapped columns are captured, relationships excluded."""
        created = datetime(2024, 1, 15, 10, 30)
        todo = Todo(
            id=7,
            description="first",
            completed=False,
            created_at=created,
            updated_at=created,
        )

        snapshot = take_snapshot(todo)

        assert snapshot == {
            "id": 7,
            "description": "first",
            "completed": False,
            "created_at": created,
            "updated_at": created,
        }


class TestSerializeSnapshot:
    """Tests for serialize_snapshot."""

    def test_serialize_snapshot_normalizes_values(self):
        """Verify snapshot values become strict JSON primitives."""
        result = serialize_snapshot(
            {"id": 1, "when": datetime(2024, 1, 15, 10, 30), "done": True}
        )

        assert result == {"id": 1, "when": "2024-01-15T10:30:00", "done": True}

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_serialize_snapshot_rejects_non_finite_floats(self, value):
        """Verify NaN and Infinity are rejected."""
        with pytest.raises(AuditSerializationError) as exc_info:
            serialize_snapshot({"score": value})

        assert exc_info.value.error_code == "audit_serialization_failed"

    def test_serialize_snapshot_rejects_non_mapping(self):
        """Verify a snapshot must be a dict."""
        with pytest.raises(AuditSerializationError):
            serialize_snapshot(["not", "a", "mapping"])  # type: ignore[arg-type]
