"""Contract for runtime telemetry and the console's logging setup."""

from __future__ import annotations

import logging
from typing import Protocol

_CONFIGURED = False


class Telemetry(Protocol):
    """Reports operational events and command outcomes."""

    def emit(self, event_name: str, payload: dict) -> None:
        """Publish telemetry event to the configured sink."""


class LoggingTelemetry:
    """Telemetry sink that writes each event as a structured log record."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("rcon_console.telemetry")

    def emit(self, event_name: str, payload: dict) -> None:
        self._logger.info(event_name, extra={"payload": payload})


def configure_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Route ``rcon_console`` logs to a file; the terminal belongs to the console UI."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    root = logging.getLogger("rcon_console")
    root.setLevel(level.upper())
    handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8") if log_file else logging.NullHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    root.addHandler(handler)
    root.propagate = False
    _CONFIGURED = True
