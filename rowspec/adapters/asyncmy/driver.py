"""AsyncMy MySQL connection handles.

Wraps asyncmy pools and connections behind the rowspec connection protocols:
placeholders are rewritten to pyformat, driver errors are mapped, and reads
come back with column key metadata.
"""

import inspect
import logging
from typing import TYPE_CHECKING, Any, Optional, Union

import asyncmy.errors  # pyright: ignore

from rowspec.adapters.asyncmy.core import (
    build_result_header,
    collect_asyncmy_rows,
    collect_column_metadata,
    map_asyncmy_exception,
    prepare_asyncmy_parameters,
)
from rowspec.core.parameters import compile_pyformat

if TYPE_CHECKING:
    from asyncmy.connection import Connection  # pyright: ignore
    from asyncmy.cursors import Cursor  # pyright: ignore
    from asyncmy.pool import Pool  # pyright: ignore

    from rowspec.core.result import ColumnMetadata, ResultHeader
    from rowspec.typing import BindPayload, Row

logger = logging.getLogger(__name__)

__all__ = (
    "AsyncmyConnection",
    "AsyncmyCursor",
    "AsyncmyExceptionHandler",
    "AsyncmyPool",
    "AsyncmyPoolConnection",
)


class AsyncmyCursor:
    """Context manager for AsyncMy cursor operations.

    Provides automatic cursor acquisition and cleanup for database operations.
    """

    __slots__ = ("connection", "cursor")

    def __init__(self, connection: "Connection") -> None:
        self.connection = connection
        self.cursor: Optional[Cursor] = None

    async def __aenter__(self) -> "Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    async def __aexit__(self, *_: Any) -> None:
        if self.cursor is not None:
            await self.cursor.close()


class AsyncmyExceptionHandler:
    """Async context manager mapping asyncmy errors onto rowspec exceptions."""

    __slots__ = ()

    async def __aenter__(self) -> None:
        return None

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is None:
            return
        if issubclass(exc_type, asyncmy.errors.Error):
            map_asyncmy_exception(exc_val)


class AsyncmyConnection:
    """A standalone asyncmy connection; torn down with :meth:`destroy`."""

    __slots__ = ("connection",)

    def __init__(self, connection: "Connection") -> None:
        self.connection = connection

    async def execute(
        self, sql: str, parameters: "BindPayload"
    ) -> "tuple[Union[list[Row], ResultHeader], list[ColumnMetadata]]":
        """Execute one statement.

        Args:
            sql: SQL with ``?`` or ``:name`` placeholders.
            parameters: Reconciled payload matching the placeholder style.

        Returns:
            Rows for statements producing a result set, a result header
            otherwise, together with the column metadata.
        """
        compiled_sql = compile_pyformat(sql, parameters)
        driver_parameters = prepare_asyncmy_parameters(parameters)
        async with AsyncmyExceptionHandler(), AsyncmyCursor(self.connection) as cursor:
            await cursor.execute(compiled_sql, driver_parameters)
            columns = collect_column_metadata(cursor)
            if cursor.description:
                fetched_data = await cursor.fetchall()
                return collect_asyncmy_rows(fetched_data, cursor.description), columns
            return build_result_header(cursor), columns

    async def destroy(self) -> None:
        """Close the underlying connection."""
        await self.connection.ensure_closed()


class AsyncmyPoolConnection(AsyncmyConnection):
    """A connection checked out of an asyncmy pool; returned with :meth:`release`."""

    __slots__ = ("pool",)

    def __init__(self, connection: "Connection", pool: "Pool") -> None:
        super().__init__(connection)
        self.pool = pool

    async def release(self) -> None:
        """Return the connection to the pool it came from."""
        released = self.pool.release(self.connection)
        if inspect.isawaitable(released):
            await released


class AsyncmyPool:
    """Adapts :class:`asyncmy.pool.Pool` to the rowspec pool protocol."""

    __slots__ = ("pool",)

    def __init__(self, pool: "Pool") -> None:
        self.pool = pool

    @property
    def size(self) -> int:
        return int(self.pool.size)

    async def acquire(self) -> AsyncmyPoolConnection:
        """Check a connection out of the pool."""
        connection = await self.pool.acquire()
        return AsyncmyPoolConnection(connection, self.pool)

    async def close(self) -> None:
        """Close the pool and wait for its connections to finish."""
        self.pool.close()
        await self.pool.wait_closed()
        logger.debug("AsyncMy pool closed")
