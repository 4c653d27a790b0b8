"""Unit tests for todoctx logging.

This module tests the logging setup, the JSON formatter used for log files
and the operation and error logging helpers.
"""

import json
import logging

import pytest

from todoctx.todo_logging import (
    LOG_FILE_ENV,
    LOG_LEVEL_ENV,
    LOGGER_NAME,
    JsonFormatter,
    log_error_with_context,
    log_operation,
    log_performance,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logger(monkeypatch):
    """Leave the package logger as it was found."""
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    monkeypatch.delenv(LOG_FILE_ENV, raising=False)
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestJsonFormatter:
    """Test cases for JsonFormatter."""

    def test_json_formatter_basic(self):
        """Test basic JSON formatting."""
        formatter = JsonFormatter()
        record = logging.getLogger("test").makeRecord("test", logging.INFO, "f.py", 1, "Test message", (), None)

        data = json.loads(formatter.format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Test message"
        assert "timestamp" in data
        assert "module" in data
        assert "function" in data
        assert "line" in data

    def test_json_formatter_with_exception(self):
        """Test JSON formatting with exception info."""
        formatter = JsonFormatter()
        try:
            raise ValueError("Test exception")
        except ValueError as e:
            record = logging.getLogger("test").makeRecord(
                "test", logging.ERROR, "f.py", 1, "Test message", (), (type(e), e, e.__traceback__)
            )

        data = json.loads(formatter.format(record))

        assert "ValueError: Test exception" in data["exception"]

    def test_json_formatter_with_extra_fields(self):
        """Test that extra fields are merged into the entry."""
        formatter = JsonFormatter()
        record = logging.getLogger("test").makeRecord(
            "test", logging.INFO, "f.py", 1, "msg", (), None,
            extra={"extra_fields": {"operation": "list", "count": 2}},
        )

        data = json.loads(formatter.format(record))

        assert data["operation"] == "list"
        assert data["count"] == 2


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_default_level(self):
        """Test that the console only shows warnings by default."""
        setup_logging()

        logger = logging.getLogger(LOGGER_NAME)
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_level_from_env(self, monkeypatch):
        """Test the environment override of the level."""
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")

        setup_logging()

        assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG

    def test_unknown_level_from_env(self, monkeypatch):
        """Test that an unknown level name falls back to WARNING."""
        monkeypatch.setenv(LOG_LEVEL_ENV, "FOO")

        setup_logging()

        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_unknown_explicit_level(self):
        """Test that an unknown explicit level name falls back to WARNING."""
        setup_logging("loud")

        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_explicit_level(self):
        """Test an explicit level."""
        setup_logging(logging.INFO)

        assert logging.getLogger(LOGGER_NAME).level == logging.INFO

    def test_log_file(self, tmp_path):
        """Test that a log file receives JSON lines at every level."""
        log_file = tmp_path / "todo.log"

        setup_logging(log_file=log_file)
        logging.getLogger(f"{LOGGER_NAME}.test").debug("hello file")
        for handler in logging.getLogger(LOGGER_NAME).handlers:
            handler.flush()

        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert any(entry["message"] == "hello file" for entry in entries)

    def test_log_file_from_env(self, tmp_path, monkeypatch):
        """Test the environment override of the log file."""
        log_file = tmp_path / "env.log"
        monkeypatch.setenv(LOG_FILE_ENV, str(log_file))

        setup_logging()

        assert len(logging.getLogger(LOGGER_NAME).handlers) == 2

    def test_handlers_not_duplicated(self):
        """Test that calling setup twice does not stack handlers."""
        setup_logging()
        setup_logging()

        assert len(logging.getLogger(LOGGER_NAME).handlers) == 1


class TestLogHelpers:
    """Test cases for the operation and error helpers."""

    def test_log_operation_success(self, caplog):
        """Test the start and completion messages."""
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            with log_operation("create_todo_list", title="T"):
                pass

        messages = [record.getMessage() for record in caplog.records]
        assert "Starting operation: create_todo_list" in messages
        assert any(message.startswith("Completed operation: create_todo_list") for message in messages)
        assert caplog.records[0].extra_fields["title"] == "T"

    def test_log_operation_failure(self, caplog):
        """Test that failures are logged and re-raised."""
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            with pytest.raises(RuntimeError):
                with log_operation("move_todo_list"):
                    raise RuntimeError("boom")

        failed = [record for record in caplog.records if record.extra_fields["status"] == "failed"]
        assert len(failed) == 1
        assert failed[0].extra_fields["error_type"] == "RuntimeError"

    def test_log_performance(self, caplog):
        """Test that the decorated function result is returned and timed."""
        @log_performance("double")
        def double(value):
            return value * 2

        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            assert double(4) == 8

        assert any(record.extra_fields.get("status") == "success" for record in caplog.records)

    def test_log_error_with_context(self, caplog):
        """Test the error message format."""
        with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
            log_error_with_context(ValueError("bad input"), {"operation": "show"})

        assert caplog.records[-1].getMessage() == "Error in show: bad input"
        assert caplog.records[-1].extra_fields["error_type"] == "ValueError"
