"""Logging module with structured logging and request tracking."""

import logging

import structlog

from audittables.core.logging.middleware import (
    RequestIdMiddleware,
    RequestLoggingMiddleware,
)


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog for the application.

    Args:
        log_level: Minimum level name to emit (e.g. "INFO", "DEBUG")
        json_logs: Render JSON lines instead of the console renderer
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if json_logs
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


__all__ = [
    "RequestIdMiddleware",
    "RequestLoggingMiddleware",
    "configure_logging",
]
