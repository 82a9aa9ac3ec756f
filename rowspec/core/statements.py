"""MySQL statement text for the generic row operations."""

import re
from collections.abc import Iterable, Sequence
from typing import Final, Optional

from rowspec.exceptions import SQLBuilderError

__all__ = (
    "OLD_VALUE_PREFIX",
    "bind_name",
    "build_delete_statement",
    "build_insert_statement",
    "build_select_statement",
    "build_update_statement",
    "format_mysql_identifier",
    "quote_mysql_identifier",
)

OLD_VALUE_PREFIX = "old"
"""Prefix of the named binds holding a row's pre-transform identity values."""

_PLAIN_BIND_NAME: Final = re.compile(r"[a-z_][a-z0-9_]*", re.IGNORECASE)


def bind_name(column: str, prefix: str = "") -> str:
    """Name of the ``:name`` bind carrying ``column``.

    Columns that are plain identifiers bind under their own name. Any other
    legal MySQL column name (``e-mail``, ``2fa``, ``first name``) is
    hex-encoded, so the bind stays a single ``:name`` marker while the column
    itself only appears inside its backtick-quoted identifier.

    Args:
        column: Column name as reported by the server.
        prefix: Prepended to the bind name, e.g. :data:`OLD_VALUE_PREFIX`.

    Returns:
        The bind name without the leading colon.
    """
    if _PLAIN_BIND_NAME.fullmatch(column):
        return f"{prefix}{column}"
    return f"{prefix}x_{column.encode('utf-8').hex()}"


def quote_mysql_identifier(identifier: str) -> str:
    """Backtick-quote a single identifier part."""
    if not identifier:
        msg = "Identifier must not be empty"
        raise SQLBuilderError(msg)
    normalized = identifier.replace("`", "``")
    return f"`{normalized}`"


def format_mysql_identifier(identifier: str) -> str:
    """Quote a possibly schema-qualified table name such as ``app.users``."""
    cleaned = identifier.strip()
    if not cleaned:
        msg = "Table name must not be empty"
        raise SQLBuilderError(msg)
    parts = [part for part in cleaned.split(".") if part]
    formatted = ".".join(quote_mysql_identifier(part) for part in parts)
    return formatted or quote_mysql_identifier(cleaned)


def _conditions(columns: "Iterable[str]", prefix: str = "") -> str:
    return " AND ".join(f"{quote_mysql_identifier(column)} = :{bind_name(column, prefix)}" for column in columns)


def build_insert_statement(table: str, columns: "Sequence[str]") -> str:
    column_clause = ", ".join(quote_mysql_identifier(column) for column in columns)
    placeholders = ", ".join("?" for _ in columns)
    return f"INSERT INTO {format_mysql_identifier(table)} ({column_clause}) VALUES ({placeholders})"


def build_select_statement(table: str, columns: "Optional[Sequence[str]]" = None) -> str:
    if not columns:
        return f"SELECT * FROM {format_mysql_identifier(table)}"
    column_clause = ", ".join(quote_mysql_identifier(column) for column in columns)
    return f"SELECT {column_clause} FROM {format_mysql_identifier(table)}"


def build_update_statement(table: str, columns: "Sequence[str]", identity: "Sequence[str]") -> str:
    """Build an UPDATE addressing the row by its pre-transform identity.

    New values bind as ``:column``, identity values as ``:oldcolumn``, with
    names that are not plain identifiers encoded by :func:`bind_name`.
    """
    if not columns:
        msg = f"UPDATE on {table!r} has no columns to set"
        raise SQLBuilderError(msg)
    if not identity:
        msg = f"UPDATE on {table!r} has no identity columns"
        raise SQLBuilderError(msg)
    assignments = ", ".join(f"{quote_mysql_identifier(column)} = :{bind_name(column)}" for column in columns)
    return f"UPDATE {format_mysql_identifier(table)} SET {assignments} WHERE {_conditions(identity, OLD_VALUE_PREFIX)}"


def build_delete_statement(table: str, identity: "Sequence[str]") -> str:
    if not identity:
        msg = f"DELETE on {table!r} has no identity columns"
        raise SQLBuilderError(msg)
    return f"DELETE FROM {format_mysql_identifier(table)} WHERE {_conditions(identity)}"
