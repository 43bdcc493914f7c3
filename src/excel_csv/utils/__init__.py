"""Utilities package for the Excel CSV adapter.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from excel_csv.utils.exceptions import (
    DisposedError,
    ErrorCode,
    ExcelCsvError,
    InvalidRangeError,
    RecordMappingError,
)
from excel_csv.utils.logging import (
    LogContext,
    StructuredLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    # Exceptions
    "DisposedError",
    "ErrorCode",
    "ExcelCsvError",
    "InvalidRangeError",
    "RecordMappingError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]
