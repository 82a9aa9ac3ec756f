import pytest

from rowspec.exceptions import (
    CheckViolationError,
    DatabaseConnectionError,
    DataError,
    ExtraParameterError,
    ForeignKeyViolationError,
    ImproperConfigurationError,
    IntegrityError,
    MissingParameterError,
    NotNullViolationError,
    ParameterError,
    RowSpecError,
    SQLBuilderError,
    SQLParsingError,
    TransactionError,
    UniqueViolationError,
)


def test_exception_hierarchy() -> None:
    """Test exception classes inherit correctly."""
    assert issubclass(UniqueViolationError, IntegrityError)
    assert issubclass(ForeignKeyViolationError, IntegrityError)
    assert issubclass(CheckViolationError, IntegrityError)
    assert issubclass(NotNullViolationError, IntegrityError)
    assert issubclass(IntegrityError, RowSpecError)

    assert issubclass(DatabaseConnectionError, RowSpecError)
    assert issubclass(TransactionError, RowSpecError)
    assert issubclass(DataError, RowSpecError)
    assert issubclass(MissingParameterError, ParameterError)
    assert issubclass(ExtraParameterError, ParameterError)
    assert issubclass(ImproperConfigurationError, RowSpecError)


def test_exception_instantiation() -> None:
    """Test exceptions can be instantiated with messages."""
    exc = UniqueViolationError("Duplicate key")
    assert str(exc) == "Duplicate key"
    assert repr(exc) == "UniqueViolationError - Duplicate key"
    assert isinstance(exc, Exception)


def test_exception_chaining() -> None:
    """Test exceptions support chaining with 'from'."""
    try:
        try:
            raise ValueError("Original error")
        except ValueError as e:
            raise UniqueViolationError("Mapped error") from e
    except UniqueViolationError as exc:
        assert exc.__cause__ is not None
        assert isinstance(exc.__cause__, ValueError)


def test_default_messages() -> None:
    assert str(SQLParsingError()) == "Issues parsing SQL statement."
    assert str(SQLBuilderError()) == "Issues building SQL statement."


def test_parameter_error_includes_sql() -> None:
    exc = ParameterError("Bad parameter", "SELECT :a")
    assert exc.sql == "SELECT :a"
    assert str(exc) == "Bad parameter\nSQL: SELECT :a"


def test_missing_parameter_error_context() -> None:
    exc = MissingParameterError(
        "Parameter 'b' not found on values object.",
        "SELECT :a, :b",
        named_placeholders=[":a", ":b"],
        values={"a": 1},
    )
    assert exc.named_placeholders == (":a", ":b")
    assert exc.cause["values"] == {"a": 1}
    with pytest.raises(ParameterError):
        raise exc
