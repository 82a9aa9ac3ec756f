from collections.abc import Sequence
from typing import Any, Optional

__all__ = (
    "CheckViolationError",
    "DataError",
    "DatabaseConnectionError",
    "ExtraParameterError",
    "ForeignKeyViolationError",
    "ImproperConfigurationError",
    "IntegrityError",
    "MissingParameterError",
    "NotNullViolationError",
    "ParameterError",
    "RowSpecError",
    "SQLBuilderError",
    "SQLParsingError",
    "SerializationError",
    "TransactionError",
    "UniqueViolationError",
)


class RowSpecError(Exception):
    """Base exception class from which all rowspec exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``RowSpecError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(RowSpecError):
    """Improper Configuration error.

    Raised when the engine or a pool configuration is used in an invalid state.
    """


class SQLParsingError(RowSpecError):
    """Issues parsing SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues parsing SQL statement."
        super().__init__(message)


class SQLBuilderError(RowSpecError):
    """Issues Building or Generating SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


class SerializationError(RowSpecError):
    """Encoding or decoding of an object failed."""


# -- SQL Parameter Errors --
class ParameterError(RowSpecError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MissingParameterError(ParameterError):
    """Raised when a named placeholder has no matching key in the values mapping.

    The query string, the detected placeholders and the original values are kept
    on the exception for diagnostics.
    """

    query_string: str
    placeholders: int
    named_placeholders: "tuple[str, ...]"
    values: Any

    def __init__(
        self,
        message: str,
        query_string: str,
        *,
        placeholders: int = 0,
        named_placeholders: "Sequence[str]" = (),
        values: Any = None,
    ) -> None:
        super().__init__(message, query_string)
        self.query_string = query_string
        self.placeholders = placeholders
        self.named_placeholders = tuple(named_placeholders)
        self.values = values

    @property
    def cause(self) -> "dict[str, Any]":
        """Diagnostic context for the failed reconciliation."""
        return {
            "query_string": self.query_string,
            "placeholders": self.placeholders,
            "named_placeholders": list(self.named_placeholders),
            "values": self.values,
        }


class ExtraParameterError(ParameterError):
    """Raised when more positional values are provided than the statement accepts."""


# -- Execution Errors --
class DatabaseConnectionError(RowSpecError):
    """Connection to the database failed or was lost."""


class TransactionError(RowSpecError):
    """Deadlock, lock wait timeout or another transaction level failure."""


class DataError(RowSpecError):
    """A value was out of range or otherwise invalid for its column."""


class IntegrityError(RowSpecError):
    """Data integrity error."""


class UniqueViolationError(IntegrityError):
    """A unique constraint or primary key was violated."""


class ForeignKeyViolationError(IntegrityError):
    """A foreign key constraint was violated."""


class NotNullViolationError(IntegrityError):
    """A NOT NULL column received no value."""


class CheckViolationError(IntegrityError):
    """A CHECK constraint was violated."""
