"""Placeholder detection and reconciliation of bind values.

Callers never declare which placeholder style a query uses. The style is
inferred from the query text: ``?`` marks (counted by the statement parser) or
``:name`` markers (found by the regex below). The supplied values are then
reshaped into exactly the payload the driver expects.
"""

import re
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, Final, Optional

from rowspec.core.parser import DEFAULT_DIALECT, get_default_parser
from rowspec.core.values import process_bind_value
from rowspec.exceptions import ExtraParameterError, MissingParameterError
from rowspec.utils.type_guards import is_bindable_scalar, is_mapping, is_sequence_value

if TYPE_CHECKING:
    from rowspec.protocols import StatementParserProtocol
    from rowspec.typing import BindPayload, BindValue

__all__ = (
    "ParameterStyle",
    "QueryDescriptor",
    "compile_pyformat",
    "describe_query",
    "extract_named_placeholders",
    "parse_query_string_values",
)


class ParameterStyle(str, Enum):
    """Placeholder style detected in a query string."""

    NONE = "none"
    QMARK = "qmark"
    NAMED_COLON = "named_colon"

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value


# Literals, quoted identifiers and comments are matched first so placeholders
# inside them are never picked up.
_PLACEHOLDER_REGEX: Final = re.compile(
    r"""
    (?P<squote>'(?:[^'\\]|\\.|'')*') |
    (?P<dquote>"(?:[^"\\]|\\.|"")*") |
    (?P<backtick>`(?:[^`]|``)*`) |
    (?P<line_comment>(?:--\s|\#)[^\r\n]*) |
    (?P<block_comment>/\*[\s\S]*?\*/) |
    (?P<named_colon>:(?P<colon_name>[a-z_][a-z0-9_]*)) |
    (?P<qmark>\?) |
    (?P<percent>%)
    """,
    re.VERBOSE | re.IGNORECASE,
)


class QueryDescriptor:
    """Placeholder layout of one query string."""

    __slots__ = ("named_placeholders", "placeholder_style", "positional_count", "query_string")

    def __init__(
        self,
        query_string: str,
        placeholder_style: ParameterStyle,
        positional_count: int = 0,
        named_placeholders: "tuple[str, ...]" = (),
    ) -> None:
        self.query_string = query_string
        self.placeholder_style = placeholder_style
        self.positional_count = positional_count
        self.named_placeholders = named_placeholders

    @property
    def parameter_names(self) -> "tuple[str, ...]":
        """Named placeholders without the leading colon, duplicates collapsed."""
        return tuple(dict.fromkeys(placeholder[1:] for placeholder in self.named_placeholders))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return (
            self.query_string == other.query_string
            and self.placeholder_style == other.placeholder_style
            and self.positional_count == other.positional_count
            and self.named_placeholders == other.named_placeholders
        )

    def __hash__(self) -> int:
        return hash((self.query_string, self.placeholder_style, self.positional_count, self.named_placeholders))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(query_string={self.query_string!r}, "
            f"placeholder_style={self.placeholder_style!r}, positional_count={self.positional_count!r}, "
            f"named_placeholders={self.named_placeholders!r})"
        )


def extract_named_placeholders(query_string: str) -> "tuple[str, ...]":
    """Find every ``:name`` placeholder in order of appearance.

    Args:
        query_string: SQL text to scan.

    Returns:
        Placeholders including the leading colon, duplicates kept.
    """
    return tuple(
        match.group("named_colon")
        for match in _PLACEHOLDER_REGEX.finditer(query_string)
        if match.group("named_colon")
    )


def describe_query(
    query_string: str, *, parser: "Optional[StatementParserProtocol]" = None, dialect: str = DEFAULT_DIALECT
) -> QueryDescriptor:
    """Detect the placeholder layout of ``query_string``.

    Args:
        query_string: SQL text to inspect.
        parser: Statement parser used to count ``?`` placeholders.
        dialect: Dialect handed to the parser.

    Returns:
        The query descriptor.
    """
    statements = (parser or get_default_parser()).identify(query_string, dialect=dialect)
    positional_count = statements[0].parameters if statements else 0
    named_placeholders = extract_named_placeholders(query_string)
    if positional_count > 0:
        style = ParameterStyle.QMARK
    elif named_placeholders:
        style = ParameterStyle.NAMED_COLON
    else:
        style = ParameterStyle.NONE
    return QueryDescriptor(query_string, style, positional_count, named_placeholders)


def parse_query_string_values(
    query_string: str,
    values: Any = None,
    *,
    force: bool = False,
    parser: "Optional[StatementParserProtocol]" = None,
    dialect: str = DEFAULT_DIALECT,
) -> "BindPayload":
    """Shape ``values`` into the bind payload ``query_string`` expects.

    Args:
        query_string: SQL text holding ``?`` or ``:name`` placeholders.
        values: A single value, a sequence or a mapping.
        force: Bind ``None`` for named placeholders missing from ``values``
            instead of raising. Pair it with ``NOT NULL`` columns so bad
            input still fails loudly at the database.
        parser: Statement parser used to count ``?`` placeholders.
        dialect: Dialect handed to the parser.

    Raises:
        MissingParameterError: A named placeholder has no value and ``force`` is off.

    Returns:
        A list for positional placeholders, a dict for named placeholders or
        ``None`` when nothing should be bound.
    """
    if values is None:
        return None

    descriptor = describe_query(query_string, parser=parser, dialect=dialect)
    placeholders = descriptor.positional_count

    if placeholders == 1:
        if is_sequence_value(values):
            return [process_bind_value(values[0] if values else None)]
        if not is_bindable_scalar(values):
            return [process_bind_value(values)]
        return [values]
    if placeholders > 0 and is_sequence_value(values):
        return [process_bind_value(value) for value in values]
    if descriptor.named_placeholders and is_mapping(values):
        payload: dict[str, BindValue] = {}
        for name in descriptor.parameter_names:
            if name not in values:
                if force:
                    payload[name] = None
                    continue
                msg = f"Parameter {name!r} not found on values object."
                raise MissingParameterError(
                    msg,
                    query_string,
                    placeholders=placeholders,
                    named_placeholders=descriptor.named_placeholders,
                    values=values,
                )
            payload[name] = process_bind_value(values[name])
        return payload
    return None


def compile_pyformat(query_string: str, parameters: "BindPayload") -> str:
    """Rewrite placeholders into the pyformat style used by MySQL drivers.

    ``?`` becomes ``%s`` for positional payloads, ``:name`` becomes
    ``%(name)s`` for named payloads and literal ``%`` signs are doubled. Text
    is returned untouched when there is nothing to bind.

    Args:
        query_string: SQL text holding ``?`` or ``:name`` placeholders.
        parameters: The reconciled payload.

    Raises:
        MissingParameterError: The payload lacks values the statement needs.
        ExtraParameterError: A positional payload holds more values than the statement uses.

    Returns:
        SQL ready for ``cursor.execute(sql, parameters)``.
    """
    if parameters is None:
        return query_string

    named = isinstance(parameters, Mapping)
    positional_count = 0
    missing: list[str] = []

    def _replace(match: "re.Match[str]") -> str:
        nonlocal positional_count
        if match.group("qmark"):
            if named:
                return "?"
            positional_count += 1
            return "%s"
        if match.group("named_colon"):
            if not named:
                return match.group(0)
            name = match.group("colon_name")
            if name not in parameters:
                missing.append(name)
            return f"%({name})s"
        return match.group(0).replace("%", "%%")

    compiled = _PLACEHOLDER_REGEX.sub(_replace, query_string)

    if missing:
        msg = f"Parameters {missing!r} not found on values object."
        raise MissingParameterError(
            msg, query_string, named_placeholders=[f":{name}" for name in missing], values=parameters
        )
    if not named:
        supplied = len(parameters)
        if supplied < positional_count:
            msg = f"Statement expects {positional_count} positional parameters, got {supplied}."
            raise MissingParameterError(msg, query_string, placeholders=positional_count, values=parameters)
        if supplied > positional_count:
            msg = f"Statement expects {positional_count} positional parameters, got {supplied}."
            raise ExtraParameterError(msg, query_string)
    return compiled
