from __future__ import annotations

import logging

notify_logger = logging.getLogger("orderdesk.notify")


class LoggingNotifier:
    """Default notifier: user-facing messages go to the ``orderdesk.notify`` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or notify_logger

    def success(self, message: str) -> None:
        self._logger.info(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)
