"""Centralized exception classes for the xlsx data source.

This module provides a small hierarchy of custom exceptions with error codes,
HTTP-style status mapping, and structured error details so callers embedding
the adapter in a service can translate failures consistently.

Exception Hierarchy:
    XDSError (base)
    ├── WorkbookError
    │   └── WorkbookNotFoundError
    ├── DataSourceConnectionError
    ├── NotConnectedError
    ├── QueryError
    └── StoreError

Error Codes:
    All errors have a unique error code (e.g., "E1001") that can be used
    for programmatic error handling and documentation.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used by the data source.

    Error codes are grouped by category:
    - E1xxx: Workbook/file errors
    - E2xxx: Connection errors
    - E3xxx: Store/query errors
    - E9xxx: Internal/unexpected errors
    """

    # Workbook errors (E1xxx)
    WORKBOOK_NOT_FOUND = "E1001"
    WORKBOOK_READ_ERROR = "E1002"

    # Connection errors (E2xxx)
    CONNECTION_FAILED = "E2001"
    NOT_CONNECTED = "E2002"

    # Store errors (E3xxx)
    QUERY_FAILED = "E3001"
    STORE_REMOVE_FAILED = "E3002"
    STORE_LOAD_FAILED = "E3003"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"
    CONFIGURATION_ERROR = "E9002"


class HTTPStatusMixin:
    """Mixin that provides an HTTP status code for exceptions.

    Subclasses set the `http_status` class attribute.
    """

    http_status: int = 500

    def get_http_status(self) -> int:
        """Get the HTTP status code for this exception.

        Returns:
            HTTP status code appropriate for this error.
        """
        return self.http_status


class XDSError(Exception, HTTPStatusMixin):
    """Base exception for all xlsx data source errors.

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
        http_status: HTTP status code (default 500).
    """

    http_status: int = 500

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
        """Convert the exception to a dictionary.

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
# Workbook Errors (E1xxx)
# =============================================================================


class WorkbookError(XDSError):
    """Base class for workbook file errors."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.WORKBOOK_READ_ERROR,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path information.

        Args:
            message: Error message.
            error_code: Error code.
            file_path: Path to the problematic workbook.
            details: Additional details.
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, error_code, details)
        self.file_path = file_path


class WorkbookNotFoundError(WorkbookError):
    """Raised when a configured workbook does not exist."""

    http_status: int = 404

    def __init__(
        self,
        file_path: str | None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path.

        Args:
            file_path: Path to the workbook that was not found, if any.
            message: Optional custom message.
            details: Additional details.
        """
        message = message or f"Workbook not found: {file_path}"
        super().__init__(
            message=message,
            error_code=ErrorCode.WORKBOOK_NOT_FOUND,
            file_path=file_path,
            details=details,
        )


# =============================================================================
# Connection Errors (E2xxx)
# =============================================================================


class DataSourceConnectionError(XDSError):
    """Raised when the configured workbooks cannot be checked or opened."""

    http_status: int = 503

    def __init__(
        self,
        message: str = "Could not connect to the Excel worksheet(s).",
        files: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the configured file list.

        Args:
            message: Error message.
            files: Workbook paths the adapter was configured with.
            details: Additional details.
        """
        details = details or {}
        if files:
            details["files"] = files
        super().__init__(message, ErrorCode.CONNECTION_FAILED, details)
        self.files = files or []


class NotConnectedError(XDSError):
    """Raised when the store is used before a successful connect."""

    http_status: int = 409

    def __init__(
        self,
        message: str = "Data source is not connected",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.NOT_CONNECTED, details)


# =============================================================================
# Store Errors (E3xxx)
# =============================================================================


class QueryError(XDSError):
    """Raised when SQLite rejects a statement."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        sql: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the failing statement.

        Args:
            message: Error message.
            sql: The SQL text that failed.
            details: Additional details.
        """
        details = details or {}
        if sql:
            details["sql"] = sql
        super().__init__(message, ErrorCode.QUERY_FAILED, details)
        self.sql = sql


class StoreError(XDSError):
    """Raised when the backing store cannot be loaded or removed."""

    http_status: int = 500

    def __init__(
        self,
        message: str,
        path: str | None = None,
        table: str | None = None,
        error_code: ErrorCode = ErrorCode.STORE_REMOVE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if path:
            details["path"] = path
        if table:
            details["table"] = table
        super().__init__(message, error_code, details)
        self.path = path
        self.table = table
