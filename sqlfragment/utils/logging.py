"""Logging configuration for sqlfragment.

All loggers live under the ``sqlfragment`` namespace. The library only emits
debug records; applications opt in to output with :func:`configure_logging`
or their own handlers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlfragment._serialization import encode_json

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = ("ROOT_LOGGER_NAME", "StructuredFormatter", "configure_logging", "get_logger")

ROOT_LOGGER_NAME = "sqlfragment"


class StructuredFormatter(logging.Formatter):
    """Structured JSON formatter."""

    def format(self, record: LogRecord) -> str:
        """Format log record as structured JSON.

        Args:
            record: The log record to format

        Returns:
            JSON formatted log entry
        """
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)  # pyright: ignore

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return encode_json(log_entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the ``sqlfragment`` namespace.

    Args:
        name: Logger name. If not provided, returns the root sqlfragment logger.

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str = "DEBUG", handler: logging.Handler | None = None) -> logging.Handler:
    """Send sqlfragment records to a handler using :class:`StructuredFormatter`.

    Existing handlers and propagation are left alone.

    Args:
        level: Logging level for the sqlfragment namespace
        handler: Handler to attach. Defaults to a stderr stream handler.

    Returns:
        The attached handler, for later removal
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())
    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    return handler
