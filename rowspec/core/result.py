"""Result types returned by statement execution.

Reads return rows alongside :class:`ColumnMetadata`; writes return a
:class:`ResultHeader`. Flag bits from the driver are decoded once, in
:meth:`ColumnMetadata.from_flags`, and nowhere else.
"""

from collections.abc import Sequence
from enum import IntFlag
from typing import Optional

from mypy_extensions import mypyc_attr

__all__ = ("ColumnFlag", "ColumnMetadata", "ResultHeader", "find_primary_key", "find_unique_keys")


class ColumnFlag(IntFlag):
    """MySQL field flag bits rowspec cares about."""

    PRIMARY_KEY = 2
    UNIQUE_KEY = 4


@mypyc_attr(allow_interpreted_subclasses=True)
class ColumnMetadata:
    """Identity capabilities of one result-set column."""

    __slots__ = ("is_primary_key", "is_unique_index", "name")

    def __init__(self, name: str, *, is_primary_key: bool = False, is_unique_index: bool = False) -> None:
        self.name = name
        self.is_primary_key = is_primary_key
        self.is_unique_index = is_unique_index

    @classmethod
    def from_flags(cls, name: str, flags: int) -> "ColumnMetadata":
        """Build metadata from the driver's field flag bitmask.

        Args:
            name: Column name.
            flags: Field flags as reported by the server.

        Returns:
            The column metadata.
        """
        column_flags = ColumnFlag(flags & (ColumnFlag.PRIMARY_KEY | ColumnFlag.UNIQUE_KEY))
        return cls(
            name,
            is_primary_key=ColumnFlag.PRIMARY_KEY in column_flags,
            is_unique_index=ColumnFlag.UNIQUE_KEY in column_flags,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return (
            self.name == other.name
            and self.is_primary_key == other.is_primary_key
            and self.is_unique_index == other.is_unique_index
        )

    def __hash__(self) -> int:
        return hash((self.name, self.is_primary_key, self.is_unique_index))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, is_primary_key={self.is_primary_key!r}, "
            f"is_unique_index={self.is_unique_index!r})"
        )


@mypyc_attr(allow_interpreted_subclasses=True)
class ResultHeader:
    """Outcome of an INSERT, UPDATE, DELETE or other non-row statement."""

    __slots__ = ("affected_rows", "insert_id", "warning_count")

    def __init__(self, affected_rows: int = 0, insert_id: Optional[int] = None, warning_count: int = 0) -> None:
        self.affected_rows = affected_rows
        self.insert_id = insert_id
        self.warning_count = warning_count

    def is_success(self) -> bool:
        """Whether the statement touched at least one row."""
        return self.affected_rows > 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return (
            self.affected_rows == other.affected_rows
            and self.insert_id == other.insert_id
            and self.warning_count == other.warning_count
        )

    def __hash__(self) -> int:
        return hash((self.affected_rows, self.insert_id, self.warning_count))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(affected_rows={self.affected_rows!r}, insert_id={self.insert_id!r}, "
            f"warning_count={self.warning_count!r})"
        )


def find_primary_key(columns: "Sequence[ColumnMetadata]") -> Optional[str]:
    """Return the first primary key column name, if any."""
    return next((column.name for column in columns if column.is_primary_key), None)


def find_unique_keys(columns: "Sequence[ColumnMetadata]") -> "list[str]":
    """Return every column that belongs to a unique index."""
    return [column.name for column in columns if column.is_unique_index]
