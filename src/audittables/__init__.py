"""Todo service with a revision audit log."""

__version__ = "0.1.0"
