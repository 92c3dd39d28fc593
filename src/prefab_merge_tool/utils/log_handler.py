"""
Logging setup and in-memory capture of merge log records.

Front ends show what the merge did (resolutions, aborts, identifier
collisions) from the records kept by MemoryLogHandler.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


@dataclass(frozen=True)
class CapturedRecord:
    """A log record kept for display."""

    timestamp: datetime
    level: str
    level_no: int
    logger_name: str
    message: str

    def format(self, show_timestamp: bool = True) -> str:
        prefix = f"{self.timestamp:%H:%M:%S} " if show_timestamp else ""
        # Keep the last two parts of the logger name
        short_name = ".".join(self.logger_name.split(".")[-2:])
        return f"{prefix}[{self.level}] {short_name} {self.message}"


Listener = Callable[[CapturedRecord], None]


class MemoryLogHandler(logging.Handler):
    """
    Logging handler that keeps the most recent records in memory.

    Listeners are called for every new record; a failing listener is
    reported through ``handleError`` and does not stop the others.
    """

    def __init__(self, max_records: int = 1000):
        super().__init__(logging.DEBUG)
        self.setFormatter(logging.Formatter("%(message)s"))
        self._records: deque[CapturedRecord] = deque(maxlen=max_records)
        self._listeners: list[Listener] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            captured = CapturedRecord(
                timestamp=datetime.fromtimestamp(record.created),
                level=record.levelname,
                level_no=record.levelno,
                logger_name=record.name,
                message=self.format(record),
            )
        except Exception:
            self.handleError(record)
            return

        self._records.append(captured)
        for listener in list(self._listeners):
            try:
                listener(captured)
            except Exception:
                self.handleError(record)

    def records(
        self,
        min_level: int = logging.DEBUG,
        logger_prefix: Optional[str] = None,
    ) -> list[CapturedRecord]:
        """
        Get kept records, oldest first.

        Args:
            min_level: Minimum log level to include
            logger_prefix: If set, only include loggers under this name
        """
        return [
            r for r in self._records
            if r.level_no >= min_level
            and (logger_prefix is None or r.logger_name.startswith(logger_prefix))
        ]

    def add_listener(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def clear(self) -> None:
        self._records.clear()


# Handlers installed by setup_logging, per logger name
_installed_handlers: dict[str, list[logging.Handler]] = {}


def setup_logging(
    level: int = logging.INFO,
    logger_name: str = "prefab_merge_tool",
    max_records: int = 1000,
) -> MemoryLogHandler:
    """
    Configure the package logger with a console and a memory handler.

    Calling it again replaces the handlers installed by the previous call.

    Returns:
        The MemoryLogHandler collecting the records
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    for handler in _installed_handlers.pop(logger_name, []):
        logger.removeHandler(handler)
        handler.close()

    memory_handler = MemoryLogHandler(max_records)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    installed = [memory_handler, console_handler]
    for handler in installed:
        logger.addHandler(handler)
    _installed_handlers[logger_name] = installed

    return memory_handler
