"""Test factories for generating test data."""

from tests.factories.todo import TodoCreateFactory, TodoUpdateFactory, build_todo_service


__all__ = [
    "TodoCreateFactory",
    "TodoUpdateFactory",
    "build_todo_service",
]
