"""Structured logging for the sqltrim CLI and library.

Usage:
    from sqltrim.core.logging import get_logger, configure_logging

    # Configure at startup
    configure_logging(log_level="INFO", log_format="console")

    # Get logger in any module
    logger = get_logger(__name__)

    # Log with structured context
    logger.info("extract_finished", statements_written=42)

    # Scope context to a block
    with log_context(input="dump.sql"):
        logger.info("table_seen", table="customers")
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import MutableMapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, cast

import structlog
from structlog.typing import FilteringBoundLogger

_run_context: ContextVar[dict[str, Any] | None] = ContextVar("run_context", default=None)


@dataclass
class ScanMetrics:
    """Counters collected during one pass over a dump."""

    operation: str
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None

    statements_read: int = 0
    statements_kept: int = 0
    bytes_read: int = 0
    bytes_kept: int = 0

    @property
    def duration_seconds(self) -> float:
        """Get duration in seconds."""
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time

    @property
    def throughput_mb_s(self) -> float:
        """Input throughput in MB/s."""
        duration = self.duration_seconds
        if duration <= 0:
            return 0.0
        return self.bytes_read / duration / 1_000_000

    def record(self, size: int, kept: bool) -> None:
        """Count one statement of ``size`` bytes."""
        self.statements_read += 1
        self.bytes_read += size
        if kept:
            self.statements_kept += 1
            self.bytes_kept += size

    def finish(self) -> ScanMetrics:
        self.end_time = time.perf_counter()
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "operation": self.operation,
            "duration_seconds": round(self.duration_seconds, 3),
            "statements_read": self.statements_read,
            "statements_kept": self.statements_kept,
            "bytes_read": self.bytes_read,
            "bytes_kept": self.bytes_kept,
            "throughput_mb_s": round(self.throughput_mb_s, 1),
        }


def _add_run_context(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Processor to add run context to log events."""
    context = _run_context.get()
    if context:
        event_dict.update(context)
    return event_dict


def configure_logging(
    log_level: str = "WARNING",
    log_format: str = "console",
    show_timestamps: bool = False,
    color: bool = True,
) -> None:
    """Configure structured logging for the application.

    Logs always go to stderr so that extract output on stdout stays a clean dump.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Output format ("console" or "json")
        show_timestamps: Whether to show timestamps in console mode
        color: Whether to use colors in console mode
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_run_context,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if show_timestamps or log_format == "json":
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso", utc=True))

    if log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=color,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound structlog logger
    """
    return cast(FilteringBoundLogger, structlog.get_logger(name))


class LogContext:
    """Context manager for adding context to logs within a scope."""

    def __init__(self, **context: Any):
        self.context = context
        self.token: Any = None

    def __enter__(self) -> LogContext:
        current = _run_context.get() or {}
        self.token = _run_context.set({**current, **self.context})
        return self

    def __exit__(self, *args: Any) -> None:
        if self.token:
            _run_context.reset(self.token)


def log_context(**context: Any) -> LogContext:
    """Create a context manager for scoped logging context.

    Usage:
        with log_context(input="dump.sql"):
            logger.info("processing")  # Will include input
    """
    return LogContext(**context)


configure_logging()
