"""Predicate and transform based row operations over a MySQL pool.

Every operation reads its targets, derives each row's identity from the
result-set column flags, and sends one statement per row. Statements run
concurrently on their own pooled connections; the first failure is raised and
statements that already finished stay applied.
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Optional, Union

from typing_extensions import TypeAlias

from rowspec.core.parameters import parse_query_string_values
from rowspec.core.parser import DEFAULT_DIALECT
from rowspec.core.result import ColumnMetadata, ResultHeader, find_primary_key, find_unique_keys
from rowspec.core.statements import (
    OLD_VALUE_PREFIX,
    bind_name,
    build_delete_statement,
    build_insert_statement,
    build_select_statement,
    build_update_statement,
)
from rowspec.exceptions import ImproperConfigurationError
from rowspec.utils.logging import get_logger, log_with_context
from rowspec.utils.type_guards import has_destroy, has_release, is_mapping

if TYPE_CHECKING:
    from types import TracebackType

    from typing_extensions import Self

    from rowspec.config import AsyncDatabaseConfig
    from rowspec.protocols import ConnectionPoolProtocol, ConnectionProtocol, StatementParserProtocol
    from rowspec.typing import Row, RowPredicate, RowTransform

__all__ = ("RowEngine", "RowIdentity")

logger = get_logger("engine")

StatementPlan: TypeAlias = "tuple[str, Any]"
"""SQL text and the loosely typed values to reconcile against it."""


class RowIdentity:
    """Columns that address a single row of one read.

    Attributes:
        key_columns: Columns used in the WHERE clause.
        protected_columns: Columns never written by ``edit``.
        is_fallback: Whether the read had neither a primary key nor a unique
            index, so every column of the row is used as its identity.
    """

    __slots__ = ("is_fallback", "key_columns", "protected_columns")

    def __init__(
        self, key_columns: "tuple[str, ...]", protected_columns: "frozenset[str]", *, is_fallback: bool = False
    ) -> None:
        self.key_columns = key_columns
        self.protected_columns = protected_columns
        self.is_fallback = is_fallback

    @classmethod
    def from_columns(cls, columns: "Sequence[ColumnMetadata]", row: "Mapping[str, Any]") -> "RowIdentity":
        """Derive the identity of ``row`` from the metadata of the read that produced it.

        The primary key wins, then every unique index column, then every
        column of the row.
        """
        primary_key = find_primary_key(columns)
        unique_keys = find_unique_keys(columns)
        protected = frozenset(([primary_key] if primary_key else []) + unique_keys)
        if primary_key is not None:
            return cls((primary_key,), protected)
        if unique_keys:
            return cls(tuple(unique_keys), protected)
        return cls(tuple(row), protected, is_fallback=True)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(key_columns={self.key_columns!r}, "
            f"protected_columns={sorted(self.protected_columns)!r}, is_fallback={self.is_fallback!r})"
        )


class RowEngine:
    """Generic data access over one connection pool.

    Build it from a database configuration (the engine then owns the pool it
    creates) or from an already open pool::

        async with RowEngine(AsyncmyConfig.from_env()) as db:
            await db.set("users", [{"email": "a@example.com"}])
            await db.edit("users", lambda row: {**row, "active": True}, lambda row: row["id"] == 18)

    Args:
        config: Configuration used to create the pool on :meth:`open`.
        pool: An open pool to use instead of ``config``.
        force: Default for binding ``None`` to missing named parameters.
        parser: Statement parser used to count positional placeholders.
        dialect: Dialect handed to the parser.
    """

    __slots__ = ("_config", "_owns_pool", "_pool", "dialect", "force", "parser")

    def __init__(
        self,
        config: "Optional[AsyncDatabaseConfig[Any, Any]]" = None,
        *,
        pool: "Optional[ConnectionPoolProtocol]" = None,
        force: bool = False,
        parser: "Optional[StatementParserProtocol]" = None,
        dialect: str = DEFAULT_DIALECT,
    ) -> None:
        if config is None and pool is None:
            msg = "RowEngine needs either a database configuration or a connection pool."
            raise ImproperConfigurationError(msg)
        self._config = config
        self._pool = pool
        self._owns_pool = False
        self.force = force
        self.parser = parser
        self.dialect = dialect

    @classmethod
    def from_env(cls, prefix: str = "MYSQL_", **kwargs: Any) -> "RowEngine":
        """Build an engine over an asyncmy pool configured from environment variables."""
        from rowspec.adapters.asyncmy.config import AsyncmyConfig

        return cls(AsyncmyConfig.from_env(prefix), **kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(config={self._config!r}, pool={self._pool!r}, force={self.force!r})"

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    @property
    def pool(self) -> "ConnectionPoolProtocol":
        """The pool statements run on.

        Raises:
            ImproperConfigurationError: If the engine has not been opened.
        """
        if self._pool is None:
            msg = "RowEngine is not open. Call 'await engine.open()' or use 'async with engine'."
            raise ImproperConfigurationError(msg)
        return self._pool

    async def open(self) -> "Self":
        """Create the pool from the configuration if there is none yet."""
        if self._pool is None and self._config is not None:
            self._pool = await self._config.create_pool()
            self._owns_pool = True
            logger.debug("Opened row engine pool", extra={"extra_fields": {"config": type(self._config).__name__}})
        return self

    async def close(self) -> None:
        """Close the pool if the engine created it."""
        if not self._owns_pool:
            return
        if self._config is not None:
            await self._config.close_pool()
        self._pool = None
        self._owns_pool = False
        logger.debug("Closed row engine pool")

    async def __aenter__(self) -> "Self":
        return await self.open()

    async def __aexit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        await self.close()

    async def query(
        self,
        sql: str,
        values: Any = None,
        connection: "Optional[ConnectionProtocol]" = None,
        *,
        force: Optional[bool] = None,
    ) -> "tuple[Union[list[Row], ResultHeader], list[ColumnMetadata]]":
        """Run one statement with loosely typed values.

        ``values`` is reshaped to match the placeholders of ``sql`` before a
        connection is acquired, so binding errors never cost a connection.

        Args:
            sql: SQL with ``?`` or ``:name`` placeholders.
            values: A single value, a sequence or a mapping.
            connection: Connection to run on. It is left open for the caller;
                otherwise a connection is taken from the pool and given back
                once the statement finishes.
            force: Override the engine's ``force`` default for this call.

        Raises:
            MissingParameterError: A named placeholder has no value and ``force`` is off.

        Returns:
            Rows or a result header, together with the column metadata.
        """
        payload = parse_query_string_values(
            sql,
            values,
            force=self.force if force is None else force,
            parser=self.parser,
            dialect=self.dialect,
        )
        if payload is None:
            bind_style = "none"
        else:
            bind_style = "named" if is_mapping(payload) else "positional"
        log_with_context(
            logger,
            logging.DEBUG,
            "Executing statement",
            sql=sql,
            bind_style=bind_style,
            bind_count=len(payload) if payload is not None else 0,
        )

        if connection is not None:
            return await self._execute(connection, sql, payload)

        acquired = await self.pool.acquire()
        try:
            return await self._execute(acquired, sql, payload)
        finally:
            if has_release(acquired):
                await acquired.release()
            elif has_destroy(acquired):
                await acquired.destroy()

    @staticmethod
    async def _execute(
        connection: "ConnectionProtocol", sql: str, payload: Any
    ) -> "tuple[Union[list[Row], ResultHeader], list[ColumnMetadata]]":
        try:
            return await connection.execute(sql, payload)
        except Exception as exc:
            log_with_context(logger, logging.DEBUG, "Statement failed", sql=sql, error=type(exc).__name__)
            raise

    async def set(self, table: str, rows: "Sequence[Mapping[str, Any]]") -> "list[ResultHeader]":
        """Insert each row with its own ``INSERT`` statement.

        Args:
            table: Target table.
            rows: Rows keyed by column name.

        Returns:
            One result header per row, in input order.
        """
        plans: list[Optional[StatementPlan]] = [
            (build_insert_statement(table, list(row)), list(row.values())) for row in rows
        ]
        return await self._dispatch(table, "insert", plans)

    async def get(
        self,
        table: str,
        columns: "Optional[Sequence[str]]" = None,
        predicate: "Optional[RowPredicate]" = None,
    ) -> "tuple[list[Row], list[ColumnMetadata]]":
        """Read a table, optionally filtering rows in memory.

        Args:
            table: Source table.
            columns: Columns to select; every column when empty.
            predicate: Keep only the rows it returns ``True`` for.

        Returns:
            The matching rows and the column metadata of the full read.
        """
        result, metadata = await self.query(build_select_statement(table, columns))
        rows = result if isinstance(result, list) else []
        if predicate is not None:
            rows = [row for row in rows if predicate(row)]
        return rows, metadata

    async def edit(
        self,
        table: str,
        transform: "RowTransform",
        predicate: "Optional[RowPredicate]" = None,
    ) -> "list[ResultHeader]":
        """Rewrite every matching row with ``transform``.

        ``transform`` receives a copy of each row. It returns the new row, or
        ``None`` to keep the copy it changed in place. Primary key and unique
        index columns are never written, and columns missing from the new row
        are left as they are. Each row is matched by its values as read, so a
        row changed or removed since then reports zero affected rows.

        Only the first primary key column reported by the read addresses a
        row. On a table with a composite primary key one statement can
        therefore update several rows sharing that column's value.

        Args:
            table: Target table.
            transform: Builds the new values of a row.
            predicate: Select the rows to rewrite; every row when omitted.

        Returns:
            One result header per matching row, in read order.
        """
        targets, columns = await self.get(table, None, predicate)
        if not targets:
            return []
        _warn_on_fallback_identity(table, columns)
        plans: list[Optional[StatementPlan]] = []
        for snapshot in targets:
            identity = RowIdentity.from_columns(columns, snapshot)
            draft = dict(snapshot)
            updated = transform(draft)
            new_row: Mapping[str, Any] = draft if updated is None else updated
            set_columns = [
                column for column in snapshot if column not in identity.protected_columns and column in new_row
            ]
            if not set_columns:
                plans.append(None)
                continue
            values = {bind_name(column): new_row[column] for column in set_columns}
            values.update({bind_name(column, OLD_VALUE_PREFIX): snapshot[column] for column in identity.key_columns})
            plans.append((build_update_statement(table, set_columns, identity.key_columns), values))
        return await self._dispatch(table, "update", plans)

    async def delete(self, table: str, predicate: "Optional[RowPredicate]" = None) -> "list[ResultHeader]":
        """Delete every matching row by its identity.

        As with :meth:`edit`, a composite primary key is matched on its first
        column only, so one statement can remove rows beyond the matched one.

        Args:
            table: Target table.
            predicate: Select the rows to delete; every row when omitted.

        Returns:
            One result header per matching row, in read order.
        """
        targets, columns = await self.get(table, None, predicate)
        if not targets:
            return []
        _warn_on_fallback_identity(table, columns)
        plans: list[Optional[StatementPlan]] = []
        for snapshot in targets:
            identity = RowIdentity.from_columns(columns, snapshot)
            values = {bind_name(column): snapshot[column] for column in identity.key_columns}
            plans.append((build_delete_statement(table, identity.key_columns), values))
        return await self._dispatch(table, "delete", plans)

    async def _write(self, plan: "Optional[StatementPlan]") -> ResultHeader:
        if plan is None:
            return ResultHeader(0)
        sql, values = plan
        result, _ = await self.query(sql, values)
        if isinstance(result, ResultHeader):
            return result
        return ResultHeader(affected_rows=len(result))

    async def _dispatch(
        self, table: str, operation: str, plans: "Sequence[Optional[StatementPlan]]"
    ) -> "list[ResultHeader]":
        if not plans:
            return []
        headers = list(await asyncio.gather(*(self._write(plan) for plan in plans)))
        log_with_context(
            logger,
            logging.DEBUG,
            "Row operation finished",
            table=table,
            operation=operation,
            statements=sum(1 for plan in plans if plan is not None),
            affected_rows=sum(header.affected_rows for header in headers),
        )
        return headers


def _warn_on_fallback_identity(table: str, columns: "Sequence[ColumnMetadata]") -> None:
    if find_primary_key(columns) is None and not find_unique_keys(columns):
        log_with_context(
            logger,
            logging.WARNING,
            "Table has no primary key or unique index; matching rows on every column",
            table=table,
        )
