"""Type aliases shared across rowspec."""

from collections.abc import Callable, Mapping
from typing import Any, Optional, Union

from typing_extensions import TypeAlias

__all__ = (
    "BindPayload",
    "BindValue",
    "JSONText",
    "Row",
    "RowPredicate",
    "RowTransform",
    "ScalarValue",
)


class JSONText(str):
    """Text produced by serializing a list or mapping to JSON.

    Behaves exactly like :class:`str`; the subclass only tags the value so
    drivers and tests can tell serialized composites from plain text.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"JSONText({str.__repr__(self)})"


ScalarValue: TypeAlias = Union[bool, int, float, bytes]
"""Values the driver binds as-is."""

BindValue: TypeAlias = Union[None, ScalarValue, str, JSONText]
"""Closed set of values produced by :func:`rowspec.core.values.process_value`.

Null (``None``), Scalar (:data:`ScalarValue`), Text (``str``) or JSON text (:class:`JSONText`).
"""

BindPayload: TypeAlias = Optional[Union["list[BindValue]", "dict[str, BindValue]"]]
"""Positional list, named mapping or ``None`` when the statement takes no binds."""

Row: TypeAlias = "dict[str, Any]"
"""A row snapshot keyed by column name."""

RowPredicate: TypeAlias = "Callable[[Mapping[str, Any]], bool]"
RowTransform: TypeAlias = "Callable[[dict[str, Any]], Optional[Mapping[str, Any]]]"
