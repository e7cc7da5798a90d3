"""Structured logging configuration for fedcompose.

This module configures structlog for consistent, machine-readable logging
across composition runs, with run-scoped context variables so every event
emitted during one validation pass can be correlated.
"""

from contextlib import AbstractContextManager
import logging
import sys
import time
from typing import Any

import structlog
from structlog.typing import EventDict


def add_app_context(
    _logger: Any, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add application-specific context to log events."""
    event_dict["service"] = "fedcompose"
    event_dict["component"] = event_dict.get("logger", "unknown")
    return event_dict


def add_run_id(_logger: Any, _method_name: str, event_dict: EventDict) -> EventDict:
    """Add the composition run ID for tracing."""
    run_id = structlog.contextvars.get_contextvars().get("run_id")
    if run_id:
        event_dict["run_id"] = run_id
    return event_dict


def configure_logging(
    environment: str = "development", log_level: str = "INFO", json_logs: bool = False
) -> None:
    """Configure structured logging for the application.

    Args:
        environment: Application environment (development/testing/production)
        log_level: Logging level (DEBUG/INFO/WARNING/ERROR)
        json_logs: Whether to output JSON format logs
    """
    # Logs go to stderr so CLI report output on stdout stays parseable
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    if json_logs or environment == "production":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    processors = [
        # Built-in processors
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        # Custom processors
        add_app_context,
        add_run_id,
        # Format and render
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def bound_context(**kwargs: Any) -> AbstractContextManager[None]:
    """Bind context variables for the duration of a ``with`` block.

    Only the given keys are unbound on exit; context bound by the caller is
    left in place.
    """
    return structlog.contextvars.bound_contextvars(**kwargs)


class CompositionRunLogger:
    """Helper for logging the duration and outcome of one composition run."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time: float | None = None
        self.duration_ms: float | None = None

    def __enter__(self) -> "CompositionRunLogger":
        self.start_time = time.perf_counter()
        self.logger.debug("composition_started", operation=self.operation)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.start_time is None:
            return

        self.duration_ms = round((time.perf_counter() - self.start_time) * 1000, 2)

        if exc_type is None:
            self.logger.info(
                "composition_completed",
                operation=self.operation,
                duration_ms=self.duration_ms,
            )
        else:
            self.logger.error(
                "composition_failed",
                operation=self.operation,
                duration_ms=self.duration_ms,
                error=str(exc_val),
                error_type=exc_type.__name__,
            )

    def log_progress(self, message: str, **kwargs: Any) -> None:
        """Log run progress with context."""
        self.logger.debug(message, operation=self.operation, **kwargs)
