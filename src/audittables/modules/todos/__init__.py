"""Todos module - audited CRUD for todo items."""

from audittables.modules.todos.routes import router


# Module metadata
__module_info__ = {
    "name": "todos",
    "version": "1.0.0",
    "description": "Todo items with revision history",
    "dependencies": [],
}

__all__ = ["router"]
