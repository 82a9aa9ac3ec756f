"""rowspec: predicate based row operations and forgiving parameter binding for MySQL."""

from rowspec import adapters, core, exceptions, typing, utils
from rowspec.__metadata__ import __version__
from rowspec.adapters.asyncmy import AsyncmyConfig
from rowspec.config import AsyncDatabaseConfig
from rowspec.core.parameters import ParameterStyle, QueryDescriptor, describe_query, parse_query_string_values
from rowspec.core.parser import SQLGlotStatementParser, StatementInfo
from rowspec.core.result import ColumnMetadata, ResultHeader
from rowspec.core.values import process_value
from rowspec.engine import RowEngine, RowIdentity
from rowspec.exceptions import (
    ExtraParameterError,
    ImproperConfigurationError,
    IntegrityError,
    MissingParameterError,
    ParameterError,
    RowSpecError,
    SQLBuilderError,
    SQLParsingError,
    UniqueViolationError,
)
from rowspec.typing import BindPayload, BindValue, JSONText, Row
from rowspec.utils.logging import configure_logging, get_logger

__all__ = (
    "AsyncDatabaseConfig",
    "AsyncmyConfig",
    "BindPayload",
    "BindValue",
    "ColumnMetadata",
    "ExtraParameterError",
    "ImproperConfigurationError",
    "IntegrityError",
    "JSONText",
    "MissingParameterError",
    "ParameterError",
    "ParameterStyle",
    "QueryDescriptor",
    "ResultHeader",
    "Row",
    "RowEngine",
    "RowIdentity",
    "RowSpecError",
    "SQLBuilderError",
    "SQLGlotStatementParser",
    "SQLParsingError",
    "StatementInfo",
    "UniqueViolationError",
    "__version__",
    "adapters",
    "configure_logging",
    "core",
    "describe_query",
    "exceptions",
    "get_logger",
    "parse_query_string_values",
    "process_value",
    "typing",
    "utils",
)
