"""Tests for the rowspec logging helpers."""

import io
import json
import logging
from collections.abc import Iterator

import pytest

from rowspec.utils.logging import StructuredFormatter, configure_logging, get_logger, log_with_context


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    root = logging.getLogger("rowspec")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate


def _record(message: str = "hello", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("rowspec.engine", logging.DEBUG, __file__, 10, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_get_logger_namespaces() -> None:
    assert get_logger().name == "rowspec"
    assert get_logger("engine").name == "rowspec.engine"
    assert get_logger("rowspec.core").name == "rowspec.core"


def test_structured_formatter_statement_fields() -> None:
    sql = "UPDATE `users`\n   SET `name` = :name\nWHERE `id` = :oldid"
    record = _record("Executing statement", extra_fields={"sql": sql, "bind_style": "named", "bind_count": 2})
    payload = json.loads(StructuredFormatter().format(record))

    assert payload["message"] == "Executing statement"
    assert payload["level"] == "DEBUG"
    assert payload["logger"] == "rowspec.engine"
    assert payload["sql"] == "UPDATE `users` SET `name` = :name WHERE `id` = :oldid"
    assert payload["bind_style"] == "named"
    assert payload["bind_count"] == 2


def test_structured_formatter_truncates_long_sql() -> None:
    record = _record("Executing statement", extra_fields={"sql": "SELECT " + "a, " * 50 + "b FROM t"})
    payload = json.loads(StructuredFormatter(max_sql_length=20).format(record))
    assert payload["sql"] == "SELECT a, a, a, a, a..."


def test_structured_formatter_without_fields() -> None:
    payload = json.loads(StructuredFormatter().format(_record("plain")))
    assert set(payload) == {"timestamp", "level", "logger", "message"}


def test_log_with_context_passes_extra_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("context")
    with caplog.at_level(logging.DEBUG, logger="rowspec"):
        log_with_context(logger, logging.DEBUG, "Row operation finished", table="users", affected_rows=2)
    assert caplog.records[-1].extra_fields == {"table": "users", "affected_rows": 2}  # type: ignore[attr-defined]


def test_log_with_context_skips_disabled_levels(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("quiet")
    logger.setLevel(logging.ERROR)
    try:
        log_with_context(logger, logging.DEBUG, "hidden")
    finally:
        logger.setLevel(logging.NOTSET)
    assert not [r for r in caplog.records if r.getMessage() == "hidden"]


def test_configure_logging_writes_json_lines() -> None:
    stream = io.StringIO()
    configure_logging(level="DEBUG", stream=stream)

    root = logging.getLogger("rowspec")
    assert root.level == logging.DEBUG
    assert root.propagate is False
    assert len(root.handlers) == 1

    log_with_context(get_logger("engine"), logging.WARNING, "Fallback identity", table="events")
    line = stream.getvalue().strip().splitlines()[-1]
    assert json.loads(line)["table"] == "events"


def test_configure_logging_plain_text() -> None:
    stream = io.StringIO()
    configure_logging(level="info", format_style="simple", stream=stream)
    get_logger("engine").info("ready")
    assert stream.getvalue().rstrip().endswith("rowspec.engine - INFO - ready")
