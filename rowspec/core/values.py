"""Coercion of arbitrary Python values into bind-safe values.

Every value that reaches the driver goes through :func:`process_value`, so the
driver only ever sees ``None``, a scalar, plain text or JSON text.
"""

from typing import Any

from rowspec.typing import BindValue, JSONText
from rowspec.utils.serializers import to_json
from rowspec.utils.type_guards import is_bindable_scalar, is_mapping, is_sequence_value

__all__ = ("process_bind_value", "process_value")


def process_value(value: Any, *, json: bool = False) -> Any:
    """Process a value so it can be bound to a statement placeholder.

    Args:
        value: The value to process.
        json: Serialize lists, tuples and mappings to a JSON string instead of
            normalizing their items.

    Returns:
        ``None`` for absent values, scalars unchanged, :class:`~rowspec.typing.JSONText`
        for composites when ``json`` is set (otherwise a list or dict of processed
        items), and the text representation of anything else.
    """
    if value is None:
        return None
    if is_bindable_scalar(value):
        return bytes(value) if isinstance(value, bytearray) else value
    if is_sequence_value(value):
        if json:
            return JSONText(to_json(value))
        return [process_value(item) for item in value]
    if is_mapping(value):
        if json:
            return JSONText(to_json(dict(value)))
        return {key: process_value(item) for key, item in value.items()}
    return str(value)


def process_bind_value(value: Any) -> BindValue:
    """Process a single bind value, serializing composites to JSON text."""
    return process_value(value, json=True)  # type: ignore[no-any-return]
