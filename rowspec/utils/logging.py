"""Loggers for rowspec and a JSON formatter for the records it emits.

Every rowspec logger lives under the ``rowspec`` namespace. Structured fields
go through :func:`log_with_context`, which stores them on the record as
``extra_fields``; :class:`StructuredFormatter` turns them into top-level JSON
keys next to the message.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import TYPE_CHECKING, Any

from rowspec._serialization import encode_json

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = ("StructuredFormatter", "configure_logging", "get_logger", "log_with_context")

ROOT_LOGGER_NAME = "rowspec"

_WHITESPACE = re.compile(r"\s+")


class StructuredFormatter(logging.Formatter):
    """Format records as single-line JSON objects.

    Statement text in the ``sql`` field is collapsed onto one line and cut at
    ``max_sql_length`` characters. Bind values are never part of a record; the
    engine only logs their style and count.
    """

    def __init__(self, *, max_sql_length: int = 1000, datefmt: str | None = None) -> None:
        super().__init__(datefmt=datefmt)
        self.max_sql_length = max_sql_length

    def format(self, record: LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            log_entry.update(extra_fields)
            if isinstance(log_entry.get("sql"), str):
                log_entry["sql"] = self.compact_sql(log_entry["sql"])
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return encode_json(log_entry)

    def compact_sql(self, sql: str) -> str:
        compacted = _WHITESPACE.sub(" ", sql).strip()
        if len(compacted) > self.max_sql_length:
            return f"{compacted[: self.max_sql_length]}..."
        return compacted


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the ``rowspec`` namespace.

    Args:
        name: Logger name. If not provided, returns the root rowspec logger.

    Returns:
        The logger.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str = "INFO", format_style: str = "structured", stream: Any = None) -> None:
    """Send rowspec records to one stream handler.

    Args:
        level: Logging level name.
        format_style: ``"structured"`` for JSON lines, anything else for plain text.
        stream: Target stream, stdout when omitted.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout if stream is None else stream)
    if format_style == "structured":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(handler)
    root_logger.propagate = False


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with structured fields when ``level`` is enabled."""
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message, extra={"extra_fields": extra_fields})
