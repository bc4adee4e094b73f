"""Custom filters for uvicorn access logging."""

import logging


class ExcludeMetricsFilter(logging.Filter):
    """
    Logging filter to exclude monitoring endpoint requests from access logs.

    This filter prevents excessive log noise from health checks and
    Prometheus scraping. Requests to paths like /metrics and /health
    will not appear in uvicorn's access logs.
    """

    def __init__(self, excluded_paths: list[str] | None = None) -> None:
        super().__init__()
        self._excluded_paths = excluded_paths

    @property
    def excluded_paths(self) -> list[str]:
        if self._excluded_paths is not None:
            return self._excluded_paths

        # Lazy import, uvicorn may build its logging config before settings
        from chat_relay.settings import app_settings

        return app_settings.LOG_EXCLUDED_PATHS

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Determine if the log record should be logged.

        Args:
            record: The log record to evaluate.

        Returns:
            False if the request path is in excluded paths, True otherwise.
        """
        message = record.getMessage()
        return not any(path in message for path in self.excluded_paths)
