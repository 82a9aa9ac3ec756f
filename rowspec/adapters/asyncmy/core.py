"""AsyncMy adapter helpers: error mapping, column metadata and row collection."""

from typing import TYPE_CHECKING, Any, Optional

from rowspec.core.result import ColumnMetadata, ResultHeader
from rowspec.exceptions import (
    CheckViolationError,
    DatabaseConnectionError,
    DataError,
    ForeignKeyViolationError,
    IntegrityError,
    NotNullViolationError,
    RowSpecError,
    SQLParsingError,
    TransactionError,
    UniqueViolationError,
)
from rowspec.typing import JSONText

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rowspec.typing import BindPayload, Row

__all__ = (
    "build_result_header",
    "collect_asyncmy_rows",
    "collect_column_metadata",
    "map_asyncmy_exception",
    "prepare_asyncmy_parameters",
)

MYSQL_ER_DUP_ENTRY = 1062
MYSQL_ER_NO_DEFAULT_FOR_FIELD = 1364
MYSQL_ER_CHECK_CONSTRAINT_VIOLATED = 3819


def _raise_mysql_error(
    error: Any, sqlstate: "Optional[str]", code: "Optional[int]", error_class: "type[RowSpecError]", description: str
) -> None:
    code_str = f"[{sqlstate or code}]" if sqlstate or code else ""
    msg = f"MySQL {description} {code_str}: {error}" if code_str else f"MySQL {description}: {error}"
    raise error_class(msg) from error


def map_asyncmy_exception(error: Any) -> None:
    """Map an AsyncMy exception onto the rowspec exception hierarchy.

    Args:
        error: The driver exception.

    Raises:
        RowSpecError: Always; the subclass depends on SQLSTATE and MySQL error code.
    """
    error_code = error.args[0] if len(error.args) >= 1 and isinstance(error.args[0], int) else None
    sqlstate = getattr(error, "sqlstate", None)

    if sqlstate == "23505" or error_code == MYSQL_ER_DUP_ENTRY:
        _raise_mysql_error(error, sqlstate, error_code, UniqueViolationError, "unique constraint violation")
    elif sqlstate == "23503" or error_code in {1216, 1217, 1451, 1452}:
        _raise_mysql_error(error, sqlstate, error_code, ForeignKeyViolationError, "foreign key constraint violation")
    elif sqlstate == "23502" or error_code in {1048, MYSQL_ER_NO_DEFAULT_FOR_FIELD}:
        _raise_mysql_error(error, sqlstate, error_code, NotNullViolationError, "not-null constraint violation")
    elif sqlstate == "23514" or error_code == MYSQL_ER_CHECK_CONSTRAINT_VIOLATED:
        _raise_mysql_error(error, sqlstate, error_code, CheckViolationError, "check constraint violation")
    elif sqlstate and sqlstate.startswith("23"):
        _raise_mysql_error(error, sqlstate, error_code, IntegrityError, "integrity constraint violation")
    elif sqlstate and sqlstate.startswith("42"):
        _raise_mysql_error(error, sqlstate, error_code, SQLParsingError, "SQL syntax error")
    elif sqlstate and sqlstate.startswith("08"):
        _raise_mysql_error(error, sqlstate, error_code, DatabaseConnectionError, "connection error")
    elif sqlstate and sqlstate.startswith("40"):
        _raise_mysql_error(error, sqlstate, error_code, TransactionError, "transaction error")
    elif sqlstate and sqlstate.startswith("22"):
        _raise_mysql_error(error, sqlstate, error_code, DataError, "data error")
    elif error_code in {2002, 2003, 2005, 2006, 2013}:
        _raise_mysql_error(error, sqlstate, error_code, DatabaseConnectionError, "connection error")
    elif error_code in {1205, 1213}:
        _raise_mysql_error(error, sqlstate, error_code, TransactionError, "transaction error")
    elif error_code in range(1064, 1100):
        _raise_mysql_error(error, sqlstate, error_code, SQLParsingError, "SQL syntax error")
    else:
        _raise_mysql_error(error, sqlstate, error_code, RowSpecError, "database error")


def prepare_asyncmy_parameters(parameters: "BindPayload") -> Any:
    """Unwrap tagged JSON text so the driver's encoders see plain ``str``.

    Args:
        parameters: The reconciled payload.

    Returns:
        A tuple for positional payloads, a dict for named payloads or ``None``.
    """
    if parameters is None:
        return None
    if isinstance(parameters, dict):
        return {key: str(value) if isinstance(value, JSONText) else value for key, value in parameters.items()}
    return tuple(str(value) if isinstance(value, JSONText) else value for value in parameters)


def collect_column_metadata(cursor: Any) -> "list[ColumnMetadata]":
    """Read column names and key flags from the cursor's last result.

    asyncmy keeps the raw field descriptor packets on ``cursor._result``;
    ``cursor.description`` drops the flags.

    Args:
        cursor: AsyncMy cursor after ``execute``.

    Returns:
        Column metadata in result-set order, empty for statements without columns.
    """
    result = getattr(cursor, "_result", None)
    fields = getattr(result, "fields", None)
    if fields:
        return [ColumnMetadata.from_flags(_field_name(field.name), int(field.flags or 0)) for field in fields]
    return [ColumnMetadata(_field_name(description[0])) for description in cursor.description or ()]


def _field_name(name: Any) -> str:
    return name.decode("utf-8") if isinstance(name, (bytes, bytearray)) else str(name)


def collect_asyncmy_rows(fetched_data: "Sequence[Any] | None", description: "Sequence[Any] | None") -> "list[Row]":
    """Collect AsyncMy rows into dictionaries keyed by column name.

    Args:
        fetched_data: Rows returned from cursor.fetchall().
        description: Cursor description metadata.

    Returns:
        Rows as dictionaries.
    """
    if not description or not fetched_data:
        return []
    column_names = [_field_name(desc[0]) for desc in description]
    if isinstance(fetched_data[0], dict):
        return [dict(row) for row in fetched_data]
    return [dict(zip(column_names, row)) for row in fetched_data]


def build_result_header(cursor: Any) -> ResultHeader:
    """Summarize a non-row statement from cursor counters.

    Args:
        cursor: AsyncMy cursor after ``execute``.

    Returns:
        The result header.
    """
    rowcount = cursor.rowcount if isinstance(cursor.rowcount, int) and cursor.rowcount >= 0 else 0
    last_id = getattr(cursor, "lastrowid", None)
    insert_id = last_id if isinstance(last_id, int) and last_id > 0 else None
    warning_count = getattr(getattr(cursor, "_result", None), "warning_count", 0)
    return ResultHeader(
        affected_rows=rowcount, insert_id=insert_id, warning_count=warning_count if isinstance(warning_count, int) else 0
    )
