"""Unit tests for AsyncmyConfig."""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from rowspec.adapters.asyncmy import AsyncmyConfig, AsyncmyConnection, AsyncmyPool, AsyncmyPoolConnection

pytestmark = pytest.mark.anyio


def test_config_defaults_to_autocommit() -> None:
    config = AsyncmyConfig(pool_config={"host": "localhost", "port": 3306})
    assert config.pool_config == {"autocommit": True, "host": "localhost", "port": 3306}
    assert config.dialect == "mysql"
    assert config.is_async is True


def test_config_autocommit_can_be_disabled() -> None:
    config = AsyncmyConfig(pool_config={"autocommit": False})
    assert config.pool_config["autocommit"] is False


def test_connection_config_excludes_pool_settings() -> None:
    config = AsyncmyConfig(
        pool_config={"host": "db", "user": "app", "minsize": 1, "maxsize": 5, "pool_recycle": 60}
    )
    assert config.connection_config_dict == {"autocommit": True, "host": "db", "user": "app"}
    assert config.pool_config_dict["maxsize"] == 5


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MYSQL_HOST", "db.internal")
    monkeypatch.setenv("MYSQL_PORT", "3307")
    monkeypatch.setenv("MYSQL_USER", "app")
    monkeypatch.setenv("MYSQL_PASSWORD", "secret")
    monkeypatch.setenv("MYSQL_DATABASE", "shop")
    monkeypatch.setenv("MYSQL_MAXSIZE", "20")
    monkeypatch.delenv("MYSQL_MINSIZE", raising=False)
    monkeypatch.delenv("MYSQL_AUTOCOMMIT", raising=False)

    config = AsyncmyConfig.from_env()

    assert config.pool_config == {
        "autocommit": True,
        "host": "db.internal",
        "user": "app",
        "password": "secret",
        "database": "shop",
        "port": 3307,
        "maxsize": 20,
    }


def test_from_env_custom_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APPDB_HOST", "other")
    monkeypatch.setenv("APPDB_AUTOCOMMIT", "false")
    config = AsyncmyConfig.from_env("APPDB_")
    assert config.pool_config["host"] == "other"
    assert config.pool_config["autocommit"] is False


async def test_pool_lifecycle() -> None:
    raw_pool = Mock()
    raw_pool.close = Mock()
    raw_pool.wait_closed = AsyncMock()
    config = AsyncmyConfig(pool_config={"host": "db", "maxsize": 2})

    with patch("rowspec.adapters.asyncmy.config.asyncmy.create_pool", AsyncMock(return_value=raw_pool)) as create:
        pool = await config.create_pool()

    create.assert_awaited_once_with(autocommit=True, host="db", maxsize=2)
    assert isinstance(pool, AsyncmyPool)
    assert pool.pool is raw_pool

    await config.close_pool()
    raw_pool.close.assert_called_once()
    raw_pool.wait_closed.assert_awaited_once()
    assert config.pool_instance is None


async def test_provide_connection_from_pool() -> None:
    raw_connection = AsyncMock()
    raw_pool = Mock()
    raw_pool.acquire = AsyncMock(return_value=raw_connection)
    raw_pool.release = AsyncMock()
    config = AsyncmyConfig(pool_instance=AsyncmyPool(raw_pool))

    async with config.provide_connection() as connection:
        assert isinstance(connection, AsyncmyPoolConnection)
        raw_pool.release.assert_not_called()

    raw_pool.release.assert_awaited_once_with(raw_connection)


async def test_provide_connection_without_pool() -> None:
    raw_connection = AsyncMock()
    config = AsyncmyConfig(pool_config={"host": "db", "maxsize": 2})

    with patch("rowspec.adapters.asyncmy.config.asyncmy.connect", AsyncMock(return_value=raw_connection)) as connect:
        async with config.provide_connection() as connection:
            assert type(connection) is AsyncmyConnection

    connect.assert_awaited_once_with(autocommit=True, host="db")
    raw_connection.ensure_closed.assert_awaited_once()
