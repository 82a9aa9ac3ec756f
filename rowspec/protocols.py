"""Runtime-checkable protocols for the collaborators rowspec talks to.

The engine only depends on these shapes, so any pool (asyncmy, a test double)
can be plugged in without subclassing.
"""

from typing import TYPE_CHECKING, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rowspec.core.result import ColumnMetadata, ResultHeader
    from rowspec.typing import BindPayload, Row

__all__ = (
    "ConnectionPoolProtocol",
    "ConnectionProtocol",
    "DestroyableConnectionProtocol",
    "ReleasableConnectionProtocol",
    "StatementInfoProtocol",
    "StatementParserProtocol",
)


@runtime_checkable
class ConnectionProtocol(Protocol):
    """A connection able to run one statement with a reconciled bind payload."""

    async def execute(
        self, sql: str, parameters: "BindPayload"
    ) -> "tuple[Union[list[Row], ResultHeader], list[ColumnMetadata]]":
        """Execute ``sql`` and return rows (or a result header) with column metadata."""
        ...


@runtime_checkable
class ReleasableConnectionProtocol(Protocol):
    """Connection handle that goes back to the pool it came from."""

    async def release(self) -> None:
        """Return the connection to its pool."""
        ...


@runtime_checkable
class DestroyableConnectionProtocol(Protocol):
    """Connection handle that can only be torn down."""

    async def destroy(self) -> None:
        """Close the underlying connection."""
        ...


@runtime_checkable
class ConnectionPoolProtocol(Protocol):
    """Pool of connections shared by every statement an engine runs."""

    async def acquire(self) -> "ConnectionProtocol":
        """Check a connection out of the pool."""
        ...

    async def close(self) -> None:
        """Close every connection and stop handing out new ones."""
        ...


@runtime_checkable
class StatementInfoProtocol(Protocol):
    """Per-statement result of :meth:`StatementParserProtocol.identify`."""

    parameters: int


@runtime_checkable
class StatementParserProtocol(Protocol):
    """Dialect-aware SQL inspection used to count positional placeholders."""

    def identify(self, sql: str, *, dialect: str) -> "Sequence[StatementInfoProtocol]":
        """Split ``sql`` into statements and report the positional placeholders of each."""
        ...
