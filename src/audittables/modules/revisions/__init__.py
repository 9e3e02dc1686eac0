"""Revisions module - cross-entity view of the audit log."""

from audittables.modules.revisions.routes import router


# Module metadata
__module_info__ = {
    "name": "revisions",
    "version": "1.0.0",
    "description": "Inspect every change recorded under one revision",
    "dependencies": [],
}

__all__ = ["router"]
