"""Utilities package for the xlsx data source.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from xlsx_datasource.utils.exceptions import (
    DataSourceConnectionError,
    ErrorCode,
    HTTPStatusMixin,
    NotConnectedError,
    QueryError,
    StoreError,
    WorkbookError,
    WorkbookNotFoundError,
    XDSError,
)
from xlsx_datasource.utils.logging import (
    LoadMetrics,
    LogContext,
    StructuredLogger,
    configure_logging,
    get_logger,
    timed_operation,
)

__all__ = [
    # Exceptions
    "DataSourceConnectionError",
    "ErrorCode",
    "HTTPStatusMixin",
    "NotConnectedError",
    "QueryError",
    "StoreError",
    "WorkbookError",
    "WorkbookNotFoundError",
    "XDSError",
    # Logging
    "LoadMetrics",
    "LogContext",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
    "timed_operation",
]
