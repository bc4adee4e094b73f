"""Tests for the uvicorn access log filter."""

import logging

import pytest

from chat_relay.uvicorn_filters import ExcludeMetricsFilter


def access_record(path: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="uvicorn.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='%s - "%s %s HTTP/1.1" %d',
        args=("127.0.0.1:50000", "GET", path, 200),
        exc_info=None,
    )


class TestExcludeMetricsFilter:
    """Test filtering of monitoring requests."""

    @pytest.mark.parametrize("path", ["/metrics", "/health"])
    def test_default_paths_excluded(self, path):
        assert ExcludeMetricsFilter().filter(access_record(path)) is False

    def test_other_paths_logged(self):
        assert ExcludeMetricsFilter().filter(access_record("/chat")) is True

    def test_custom_paths(self):
        """Test explicit paths replace the configured ones."""
        log_filter = ExcludeMetricsFilter(excluded_paths=["/chat"])

        assert log_filter.filter(access_record("/chat")) is False
        assert log_filter.filter(access_record("/metrics")) is True
