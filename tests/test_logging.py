"""Tests for structured logging functionality."""

import json
import logging
import sys

from chat_relay.logging import (
    HumanReadableFormatter,
    StructuredJSONFormatter,
    clear_log_context,
    get_connection_tag,
    get_log_context,
    set_log_context,
)
from chat_relay.uvicorn_filters import ExcludeMetricsFilter


def make_record(level=logging.INFO, msg="Test message", **extra):
    record = logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="/test/test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    """Test log context management."""

    def test_set_log_context_adds_fields(self):
        """Test that set_log_context adds fields to log context."""
        clear_log_context()
        set_log_context(connection_id="conn-1", author="alice")

        context = get_log_context()

        assert context["connection_id"] == "conn-1"
        assert context["author"] == "alice"

        clear_log_context()

    def test_set_log_context_updates_existing_fields(self):
        """Test that set_log_context merges into the existing context."""
        clear_log_context()
        set_log_context(connection_id="conn-1")
        set_log_context(author="alice")

        assert get_log_context() == {"connection_id": "conn-1", "author": "alice"}

        clear_log_context()

    def test_clear_log_context_removes_fields(self):
        set_log_context(connection_id="conn-1")
        clear_log_context()

        assert get_log_context() == {}


class TestConnectionTag:
    """Test the short connection id used in console output."""

    def test_tag_outside_connection(self):
        clear_log_context()

        assert get_connection_tag() == "-"

    def test_tag_truncates_connection_id(self):
        set_log_context(connection_id="0123456789abcdef")

        assert get_connection_tag() == "01234567"

        clear_log_context()


class TestStructuredJSONFormatter:
    """Test JSON formatter for structured logging."""

    def test_format_includes_standard_fields(self):
        clear_log_context()

        log_data = json.loads(StructuredJSONFormatter().format(make_record()))

        assert "timestamp" in log_data
        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "test_logger"
        assert log_data["message"] == "Test message"
        assert log_data["line"] == 10

    def test_format_includes_context_fields(self):
        """Test connection context is merged into every record."""
        set_log_context(connection_id="conn-1", author="alice")

        log_data = json.loads(StructuredJSONFormatter().format(make_record()))

        assert log_data["connection_id"] == "conn-1"
        assert log_data["author"] == "alice"

        clear_log_context()

    def test_format_includes_extra_fields(self):
        record = make_record(close_code=4000)

        log_data = json.loads(StructuredJSONFormatter().format(record))

        assert log_data["close_code"] == 4000

    def test_format_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        log_data = json.loads(StructuredJSONFormatter().format(record))

        assert "ValueError: boom" in log_data["exception"]


class TestHumanReadableFormatter:
    """Test console formatter."""

    def test_info_format_has_connection_tag(self):
        set_log_context(connection_id="abcdef0123456789")

        formatted = HumanReadableFormatter().format(make_record())

        assert "[abcdef01] INFO: Test message" in formatted

        clear_log_context()

    def test_error_format_has_location(self):
        clear_log_context()

        formatted = HumanReadableFormatter().format(
            make_record(level=logging.ERROR, msg="Broken")
        )

        assert "[-] ERROR:" in formatted
        assert ":10 - Broken" in formatted


class TestSetupLogging:
    """Test logger configuration."""

    def test_access_log_filter_installed_once(self):
        """Test repeated setup does not stack access log filters."""
        from chat_relay.logging import setup_logging

        setup_logging()
        setup_logging()

        filters = [
            f
            for f in logging.getLogger("uvicorn.access").filters
            if isinstance(f, ExcludeMetricsFilter)
        ]
        assert len(filters) == 1
