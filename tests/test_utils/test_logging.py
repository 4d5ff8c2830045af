"""Tests for the structured logging utilities."""

import logging
import time
from unittest.mock import MagicMock, patch

from xlsx_datasource.utils.logging import (
    LoadMetrics,
    LogContext,
    StructuredLogFormatter,
    StructuredLogger,
    clear_context,
    configure_logging,
    get_connection_id,
    get_extra_context,
    get_logger,
    set_connection_id,
    set_extra_context,
    timed_operation,
)


class TestContextVariables:
    """Tests for context variable management."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_connection_id_default_none(self) -> None:
        assert get_connection_id() is None

    def test_set_and_get_connection_id(self) -> None:
        set_connection_id("conn-1")
        assert get_connection_id() == "conn-1"

    def test_extra_context_default_empty(self) -> None:
        assert get_extra_context() == {}

    def test_clear_context(self) -> None:
        set_connection_id("conn-1")
        set_extra_context({"source": "book.xlsx"})

        clear_context()

        assert get_connection_id() is None
        assert get_extra_context() == {}


class TestLoadMetrics:
    """Tests for LoadMetrics class."""

    def test_initialization(self) -> None:
        metrics = LoadMetrics(operation="connect")
        assert metrics.duration_seconds == 0.0
        assert metrics.sheets_read == 0
        assert metrics.tables_loaded == 0
        assert metrics.rows_loaded == 0

    def test_finish_calculates_duration(self) -> None:
        metrics = LoadMetrics(operation="connect")
        time.sleep(0.01)
        metrics.finish()
        assert metrics.duration_seconds > 0
        assert metrics.end_time is not None

    def test_to_dict_excludes_zero_values(self) -> None:
        metrics = LoadMetrics(operation="connect")
        result = metrics.to_dict()
        assert "rows_loaded" not in result
        assert "tables_loaded" not in result

    def test_to_dict_with_counts(self) -> None:
        metrics = LoadMetrics(operation="connect")
        metrics.sheets_read = 2
        metrics.tables_loaded = 2
        metrics.rows_loaded = 40
        metrics.custom_metrics = {"skipped": 1}

        result = metrics.to_dict()
        assert result["sheets_read"] == 2
        assert result["tables_loaded"] == 2
        assert result["rows_loaded"] == 40
        assert result["custom_metrics"] == {"skipped": 1}


class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    def setup_method(self) -> None:
        self.logger = get_logger("test_logger")

    def test_get_logger_returns_structured_logger(self) -> None:
        assert isinstance(get_logger(__name__), StructuredLogger)
        assert isinstance(self.logger.logger, logging.Logger)

    def test_build_message_with_kwargs(self) -> None:
        msg = self.logger._build_message("Loaded", table="orders", rows=3)
        assert msg == "Loaded | table=orders, rows=3"

    def test_build_message_without_kwargs(self) -> None:
        assert self.logger._build_message("Loaded") == "Loaded"

    @patch.object(logging.Logger, "warning")
    def test_warning_logging(self, mock_warning: MagicMock) -> None:
        self.logger.warning("Workbook not found", path="x.xlsx")
        mock_warning.assert_called_once()
        assert "path=x.xlsx" in mock_warning.call_args[0][0]

    @patch.object(logging.Logger, "error")
    def test_error_logging(self, mock_error: MagicMock) -> None:
        self.logger.error("Failed", exc_info=False)
        mock_error.assert_called_once()

    @patch.object(logging.Logger, "info")
    def test_log_metrics(self, mock_info: MagicMock) -> None:
        metrics = LoadMetrics(operation="connect")
        metrics.rows_loaded = 12
        self.logger.log_metrics(metrics)
        call_args = mock_info.call_args[0][0]
        assert "Performance: connect" in call_args
        assert "rows_loaded=12" in call_args


class TestLogContext:
    """Tests for LogContext context manager."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_context_sets_and_restores_values(self) -> None:
        set_connection_id("outer")
        with LogContext(connection_id="inner", source="book.xlsx"):
            assert get_connection_id() == "inner"
            assert get_extra_context() == {"source": "book.xlsx"}

        assert get_connection_id() == "outer"
        assert get_extra_context() == {}

    def test_nested_contexts_merge(self) -> None:
        with LogContext(connection_id="c1"):
            with LogContext(source="book.xlsx"):
                assert get_connection_id() == "c1"
                assert get_extra_context() == {"source": "book.xlsx"}
            assert get_extra_context() == {}


class TestStructuredLogFormatter:
    def teardown_method(self) -> None:
        clear_context()

    def test_prefixes_context(self) -> None:
        formatter = StructuredLogFormatter("%(message)s")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)

        with LogContext(connection_id="c1", source="book.xlsx"):
            output = formatter.format(record)

        assert output == "[connection_id=c1 source=book.xlsx] hello"
        assert record.msg == "hello"

    def test_no_prefix_without_context(self) -> None:
        formatter = StructuredLogFormatter("%(message)s")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
        assert formatter.format(record) == "hello"


class TestTimedOperation:
    @patch.object(StructuredLogger, "log_metrics")
    def test_timed_operation_logs_metrics(self, mock_log: MagicMock) -> None:
        logger = get_logger("test")
        with timed_operation(logger, "connect") as metrics:
            metrics.rows_loaded = 5

        mock_log.assert_called_once()
        logged = mock_log.call_args[0][0]
        assert logged.operation == "connect"
        assert logged.rows_loaded == 5
        assert logged.end_time is not None


class TestConfigureLogging:
    def test_configure_with_string_level(self) -> None:
        configure_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_with_int_level(self) -> None:
        configure_logging(level=logging.WARNING)
        assert logging.getLogger().level == logging.WARNING

    def test_plain_formatter(self) -> None:
        configure_logging(level=logging.INFO, use_structured_formatter=False)
        handler = logging.getLogger().handlers[0]
        assert not isinstance(handler.formatter, StructuredLogFormatter)
