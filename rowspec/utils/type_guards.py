"""Type guard functions for runtime type checking in rowspec.

These checks replace ad-hoc ``isinstance`` chains and ``hasattr`` checks at
call sites so the type checker can follow the narrowing.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from rowspec.protocols import DestroyableConnectionProtocol, ReleasableConnectionProtocol

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

    from rowspec.typing import ScalarValue

__all__ = (
    "has_destroy",
    "has_release",
    "is_bindable_scalar",
    "is_mapping",
    "is_sequence_value",
)


def is_mapping(obj: Any) -> "TypeGuard[Mapping[str, Any]]":
    """Check if a value is a keyed structure (any :class:`~collections.abc.Mapping`).

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, Mapping)


def is_sequence_value(obj: Any) -> "TypeGuard[list[Any] | tuple[Any, ...]]":
    """Check if a value is a list or tuple.

    Strings, bytes and other iterables are deliberately not sequences here.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, (list, tuple))


def is_bindable_scalar(obj: Any) -> "TypeGuard[ScalarValue | str]":
    """Check if a value can be handed to the driver unchanged.

    Args:
        obj: Value to check.

    Returns:
        True for booleans, integers, floats, text and binary values.
    """
    return isinstance(obj, (bool, int, float, str, bytes, bytearray))


def has_release(obj: Any) -> "TypeGuard[ReleasableConnectionProtocol]":
    """Check if a connection handle can be returned to its pool."""
    return isinstance(obj, ReleasableConnectionProtocol)


def has_destroy(obj: Any) -> "TypeGuard[DestroyableConnectionProtocol]":
    """Check if a connection handle can be torn down."""
    return isinstance(obj, DestroyableConnectionProtocol)
