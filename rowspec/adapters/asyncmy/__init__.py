from rowspec.adapters.asyncmy.config import (
    CONNECTION_FIELDS,
    POOL_FIELDS,
    AsyncmyConfig,
    AsyncmyConnectionConfig,
    AsyncmyPoolConfig,
)
from rowspec.adapters.asyncmy.driver import (
    AsyncmyConnection,
    AsyncmyCursor,
    AsyncmyExceptionHandler,
    AsyncmyPool,
    AsyncmyPoolConnection,
)

__all__ = (
    "CONNECTION_FIELDS",
    "POOL_FIELDS",
    "AsyncmyConfig",
    "AsyncmyConnection",
    "AsyncmyConnectionConfig",
    "AsyncmyCursor",
    "AsyncmyExceptionHandler",
    "AsyncmyPool",
    "AsyncmyPoolConfig",
    "AsyncmyPoolConnection",
)
