"""Parameter normalization, placeholder reconciliation and statement assembly."""

from rowspec.core.parameters import (
    ParameterStyle,
    QueryDescriptor,
    compile_pyformat,
    describe_query,
    extract_named_placeholders,
    parse_query_string_values,
)
from rowspec.core.parser import SQLGlotStatementParser, StatementInfo
from rowspec.core.result import ColumnFlag, ColumnMetadata, ResultHeader
from rowspec.core.values import process_bind_value, process_value

__all__ = (
    "ColumnFlag",
    "ColumnMetadata",
    "ParameterStyle",
    "QueryDescriptor",
    "ResultHeader",
    "SQLGlotStatementParser",
    "StatementInfo",
    "compile_pyformat",
    "describe_query",
    "extract_named_placeholders",
    "parse_query_string_values",
    "process_bind_value",
    "process_value",
)
