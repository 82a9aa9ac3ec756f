"""Asyncmy database configuration using TypedDict for better maintainability."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, ClassVar, Optional, TypedDict

import asyncmy
from typing_extensions import NotRequired

from rowspec.adapters.asyncmy.driver import AsyncmyConnection, AsyncmyPool, AsyncmyPoolConnection
from rowspec.config import AsyncDatabaseConfig, env_bool, env_int

__all__ = ("CONNECTION_FIELDS", "POOL_FIELDS", "AsyncmyConfig", "AsyncmyConnectionConfig", "AsyncmyPoolConfig")

logger = logging.getLogger(__name__)


class AsyncmyConnectionConfig(TypedDict, total=False):
    """Asyncmy connection configuration as TypedDict.

    Basic connection parameters for asyncmy.connect().
    """

    host: NotRequired[str]
    """Host where the database server is located."""

    user: NotRequired[str]
    """The username used to authenticate with the database."""

    password: NotRequired[str]
    """The password used to authenticate with the database."""

    database: NotRequired[str]
    """The database name to use."""

    port: NotRequired[int]
    """The TCP/IP port of the MySQL server."""

    unix_socket: NotRequired[str]
    """The location of the Unix socket file."""

    charset: NotRequired[str]
    """The character set to use for the connection."""

    connect_timeout: NotRequired[float]
    """Timeout before throwing an error when connecting."""

    autocommit: NotRequired[bool]
    """If True, autocommit mode will be enabled."""

    ssl: NotRequired[Any]
    """SSL connection parameters or boolean."""

    sql_mode: NotRequired[str]
    """Default SQL_MODE to use."""

    init_command: NotRequired[str]
    """Initial SQL statement to execute once connected."""


class AsyncmyPoolConfig(AsyncmyConnectionConfig, total=False):
    """Asyncmy pool configuration as TypedDict.

    All parameters for asyncmy.create_pool() including connection parameters.
    """

    minsize: NotRequired[int]
    """Minimum number of connections to keep in the pool."""

    maxsize: NotRequired[int]
    """Maximum number of connections allowed in the pool."""

    echo: NotRequired[bool]
    """If True, logging will be enabled for all SQL statements."""

    pool_recycle: NotRequired[int]
    """Number of seconds after which a connection is recycled."""


CONNECTION_FIELDS = frozenset(AsyncmyConnectionConfig.__annotations__)
POOL_FIELDS = frozenset(AsyncmyPoolConfig.__annotations__) | CONNECTION_FIELDS


class AsyncmyConfig(AsyncDatabaseConfig[AsyncmyConnection, AsyncmyPool]):
    """Configuration for an asyncmy connection pool.

    Statements run outside explicit transactions, so ``autocommit`` defaults
    to ``True`` unless the pool configuration says otherwise.
    """

    __slots__ = ()

    dialect: ClassVar[str] = "mysql"

    def __init__(
        self, pool_config: "Optional[AsyncmyPoolConfig]" = None, pool_instance: "Optional[AsyncmyPool]" = None
    ) -> None:
        """Initialize Asyncmy configuration.

        Args:
            pool_config: Asyncmy pool parameters, connection parameters included.
            pool_instance: An already created pool to reuse.
        """
        config: dict[str, Any] = {"autocommit": True}
        config.update(pool_config or {})
        super().__init__(pool_config=config, pool_instance=pool_instance)

    @classmethod
    def from_env(cls, prefix: str = "MYSQL_") -> "AsyncmyConfig":
        """Build a configuration from environment variables.

        Reads ``<prefix>HOST``, ``<prefix>PORT``, ``<prefix>USER``,
        ``<prefix>PASSWORD``, ``<prefix>DATABASE``, ``<prefix>MINSIZE``,
        ``<prefix>MAXSIZE`` and ``<prefix>AUTOCOMMIT``. Unset variables are
        left to asyncmy's defaults.

        Args:
            prefix: Environment variable prefix.

        Returns:
            The configuration.
        """
        pool_config: AsyncmyPoolConfig = {}
        for field in ("host", "user", "password", "database"):
            value = os.getenv(f"{prefix}{field.upper()}")
            if value is not None:
                pool_config[field] = value  # type: ignore[literal-required]
        for field in ("port", "minsize", "maxsize"):
            number = env_int(f"{prefix}{field.upper()}")
            if number is not None:
                pool_config[field] = number  # type: ignore[literal-required]
        pool_config["autocommit"] = env_bool(f"{prefix}AUTOCOMMIT", True)
        return cls(pool_config=pool_config)

    @property
    def connection_config_dict(self) -> "dict[str, Any]":
        """Return the connection subset of the pool configuration."""
        return {k: v for k, v in self.pool_config.items() if k in CONNECTION_FIELDS}

    @property
    def pool_config_dict(self) -> "dict[str, Any]":
        """Return the pool configuration as a dict."""
        return {k: v for k, v in self.pool_config.items() if k in POOL_FIELDS}

    async def _create_pool(self) -> AsyncmyPool:
        """Create the actual async connection pool."""
        return AsyncmyPool(await asyncmy.create_pool(**self.pool_config_dict))

    async def _close_pool(self) -> None:
        """Close the actual async connection pool."""
        if self.pool_instance is not None:
            await self.pool_instance.close()

    async def create_connection(self) -> AsyncmyConnection:
        """Create a single async connection (not from pool).

        Returns:
            An Asyncmy connection instance.
        """
        return AsyncmyConnection(await asyncmy.connect(**self.connection_config_dict))

    @asynccontextmanager
    async def provide_connection(self, *args: Any, **kwargs: Any) -> "AsyncGenerator[AsyncmyConnection, None]":
        """Provide an async connection context manager.

        Uses the pool when one exists, otherwise a standalone connection.

        Yields:
            An Asyncmy connection instance.
        """
        if self.pool_instance is not None:
            connection: AsyncmyConnection = await self.pool_instance.acquire()
            try:
                yield connection
            finally:
                if isinstance(connection, AsyncmyPoolConnection):
                    await connection.release()
        else:
            connection = await self.create_connection()
            try:
                yield connection
            finally:
                await connection.destroy()
