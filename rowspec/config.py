import os
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar

from rowspec.utils.logging import get_logger

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

    from rowspec.protocols import ConnectionPoolProtocol, ConnectionProtocol


__all__ = ("AsyncDatabaseConfig", "ConnectionT", "PoolT", "env_bool", "env_int")

ConnectionT = TypeVar("ConnectionT", bound="ConnectionProtocol")
PoolT = TypeVar("PoolT", bound="ConnectionPoolProtocol")

logger = get_logger("config")


class AsyncDatabaseConfig(ABC, Generic[ConnectionT, PoolT]):
    """Generic async database configuration owning one pool instance."""

    __slots__ = ("pool_config", "pool_instance")

    is_async: "ClassVar[bool]" = True
    supports_connection_pooling: "ClassVar[bool]" = True
    dialect: "ClassVar[str]" = "mysql"

    def __init__(
        self, *, pool_config: "Optional[dict[str, Any]]" = None, pool_instance: "Optional[PoolT]" = None
    ) -> None:
        self.pool_instance = pool_instance
        self.pool_config = pool_config or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pool_instance={self.pool_instance!r})"

    async def create_pool(self) -> PoolT:
        """Create the pool unless one already exists.

        Returns:
            The created pool.
        """
        if self.pool_instance is not None:
            return self.pool_instance
        self.pool_instance = await self._create_pool()
        logger.debug("Created %s pool", self.dialect, extra={"extra_fields": {"config": type(self).__name__}})
        return self.pool_instance

    async def close_pool(self) -> None:
        """Close the pool if one was created."""
        if self.pool_instance is None:
            return
        await self._close_pool()
        self.pool_instance = None
        logger.debug("Closed %s pool", self.dialect)

    async def provide_pool(self, *args: Any, **kwargs: Any) -> PoolT:
        """Provide pool instance."""
        if self.pool_instance is None:
            self.pool_instance = await self.create_pool()
        return self.pool_instance

    @abstractmethod
    async def create_connection(self) -> ConnectionT:
        """Create a standalone connection outside the pool."""
        raise NotImplementedError

    @abstractmethod
    def provide_connection(self, *args: Any, **kwargs: Any) -> "AbstractAsyncContextManager[ConnectionT]":
        """Provide a connection that is cleaned up when the context exits."""
        raise NotImplementedError

    @abstractmethod
    async def _create_pool(self) -> PoolT:
        """Actual async pool creation implementation."""
        raise NotImplementedError

    @abstractmethod
    async def _close_pool(self) -> None:
        """Actual async pool destruction implementation."""
        raise NotImplementedError


def env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on", "enabled")


def env_int(key: str, default: Optional[int] = None) -> Optional[int]:
    """Get integer value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid integer value for %s: %s, using default %s", key, value, default)
        return default
