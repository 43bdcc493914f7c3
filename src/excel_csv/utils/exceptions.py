"""Centralized exception classes for the Excel CSV adapter.

This module provides a small hierarchy of custom exceptions with error codes
and structured error details so callers can handle adapter failures
consistently.

Exception Hierarchy:
    ExcelCsvError (base)
    ├── DisposedError
    ├── InvalidRangeError
    └── RecordMappingError

Errors raised by openpyxl or the operating system while opening or saving a
workbook are not wrapped; they reach the caller unchanged.

Error Codes:
    All errors have a unique error code (e.g., "E1001") that can be used
    for programmatic error handling and documentation.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used by the adapter.

    Error codes are grouped by category:
    - E1xxx: Parser/serializer lifecycle and addressing errors
    - E2xxx: Record mapping errors
    - E9xxx: Internal errors
    """

    # Component errors (E1xxx)
    DISPOSED = "E1001"
    INVALID_RANGE = "E1002"

    # Mapping errors (E2xxx)
    RECORD_MAPPING_FAILED = "E2001"
    MISSING_HEADER = "E2002"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"


class ExcelCsvError(Exception):
    """Base exception for all adapter errors.

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary for structured logging.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# Component Errors (E1xxx)
# =============================================================================


class DisposedError(ExcelCsvError, ValueError):
    """Raised when a parser or serializer is used after it has been closed.

    Subclasses ValueError, matching what Python file objects raise for
    operations on a closed file.
    """

    def __init__(
        self,
        component: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the name of the closed component.

        Args:
            component: Class name of the closed component.
            details: Additional details.
        """
        details = details or {}
        details["component"] = component
        super().__init__(
            f"Cannot operate on a closed {component}",
            ErrorCode.DISPOSED,
            details,
        )
        self.component = component


class InvalidRangeError(ExcelCsvError, ValueError):
    """Raised when a range is malformed or holds no used cells."""

    def __init__(
        self,
        message: str,
        coordinate: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the offending range coordinate.

        Args:
            message: Error message.
            coordinate: A1-style coordinate of the range, when known.
            details: Additional details.
        """
        details = details or {}
        if coordinate:
            details["coordinate"] = coordinate
        super().__init__(message, ErrorCode.INVALID_RANGE, details)
        self.coordinate = coordinate


# =============================================================================
# Mapping Errors (E2xxx)
# =============================================================================


class RecordMappingError(ExcelCsvError):
    """Raised when a record cannot be bound to or from a model."""

    def __init__(
        self,
        message: str,
        row: int | None = None,
        raw_record: str | None = None,
        error_code: ErrorCode = ErrorCode.RECORD_MAPPING_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the row context of the failing record.

        Args:
            message: Error message.
            row: Cursor row of the record that failed.
            raw_record: Delimited text of the record, for diagnostics.
            error_code: Error code.
            details: Additional details.
        """
        details = details or {}
        if row is not None:
            details["row"] = row
        if raw_record is not None:
            details["raw_record"] = raw_record
        super().__init__(message, error_code, details)
        self.row = row
        self.raw_record = raw_record

