"""Key=value logging for parser and serializer lifecycles.

Messages carry structured fields appended after a ``|`` separator, and the
formatter installed by :func:`configure_logging` prefixes every record with
the workbook/sheet scope opened by :class:`LogContext`::

    logger = get_logger(__name__)

    with LogContext(workbook="people.xlsx", sheet="Export"):
        logger.info("Saving workbook", rows=4)
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from excel_csv.config import Settings, settings

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_scope_var: ContextVar[dict[str, Any] | None] = ContextVar(
    "excel_csv_log_scope", default=None
)


def get_extra_context() -> dict[str, Any]:
    """Fields of the innermost active :class:`LogContext`."""
    scope = _scope_var.get()
    return scope if scope is not None else {}


def clear_context() -> None:
    _scope_var.set(None)


@dataclass
class PerformanceMetrics:
    """Timing for a single workbook operation such as a save.

    ``rows_processed`` and ``custom_metrics`` are only reported when set.
    """

    operation: str
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    duration_seconds: float = 0.0
    rows_processed: int = 0
    custom_metrics: dict[str, Any] = field(default_factory=dict)

    def finish(self) -> None:
        self.end_time = datetime.now(UTC)
        self.duration_seconds = (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "operation": self.operation,
            "duration_seconds": self.duration_seconds,
        }
        if self.rows_processed > 0:
            result["rows_processed"] = self.rows_processed
        if self.custom_metrics:
            result["custom_metrics"] = self.custom_metrics
        return result


class StructuredLogFormatter(logging.Formatter):
    """Formatter that renders the active scope as ``[key=value ...]``."""

    def format(self, record: logging.LogRecord) -> str:
        pairs = get_extra_context().items()
        scope = " ".join(f"{key}={value}" for key, value in pairs)
        if not scope:
            return super().format(record)

        message = record.msg
        record.msg = f"[{scope}] {message}"
        try:
            return super().format(record)
        finally:
            record.msg = message


class StructuredLogger:
    """Standard logger whose keyword arguments become ``key=value`` pairs."""

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    @staticmethod
    def _build_message(message: str, **kwargs: Any) -> str:
        if not kwargs:
            return message
        pairs = ", ".join(f"{key}={value}" for key, value in kwargs.items())
        return f"{message} | {pairs}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._build_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._build_message(message, **kwargs))

    def log_performance(self, metrics: PerformanceMetrics) -> None:
        self.info(f"Performance: {metrics.operation}", **metrics.to_dict())


class LogContext:
    """Scope workbook/sheet fields onto every record logged inside the block.

    Nested contexts merge with the enclosing one and restore it on exit.
    """

    def __init__(self, **fields: Any) -> None:
        self._fields = fields
        self._outer: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self._outer = get_extra_context()
        _scope_var.set({**self._outer, **self._fields})
        return self

    def __exit__(self, *args: Any) -> None:
        _scope_var.set(self._outer or None)


@contextmanager
def timed_operation(
    logger: StructuredLogger,
    operation: str,
) -> Generator[PerformanceMetrics, None, None]:
    """Time the block and log its metrics on exit, even when it raises."""
    metrics = PerformanceMetrics(operation=operation)
    try:
        yield metrics
    finally:
        metrics.finish()
        logger.log_performance(metrics)


def configure_logging(
    level: int | str | None = None,
    *,
    config: Settings | None = None,
) -> None:
    """Install a single structured stream handler on the root logger.

    Args:
        level: Log level as an int or a name such as ``"INFO"``. Defaults to
            the level derived from ``config``.
        config: Settings to take the level from; defaults to the
            environment-loaded settings. ``debug`` forces DEBUG.
    """
    if level is None:
        level = (config or settings).effective_log_level
    elif isinstance(level, str):
        level = getattr(logging, level.upper())

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(StructuredLogFormatter(DEFAULT_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)
