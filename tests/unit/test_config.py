"""Tests for the base async database configuration."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from unittest.mock import AsyncMock

import pytest

from rowspec.config import AsyncDatabaseConfig, env_bool, env_int

pytestmark = pytest.mark.anyio


class DummyConfig(AsyncDatabaseConfig[Any, Any]):
    __slots__ = ("created",)

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.created = 0

    async def create_connection(self) -> Any:
        return AsyncMock()

    @asynccontextmanager
    async def provide_connection(self, *args: Any, **kwargs: Any) -> AsyncGenerator[Any, None]:
        yield await self.create_connection()

    async def _create_pool(self) -> Any:
        self.created += 1
        return AsyncMock()

    async def _close_pool(self) -> None:
        await self.pool_instance.close()


async def test_create_pool_is_idempotent() -> None:
    config = DummyConfig(pool_config={"host": "localhost"})
    pool = await config.create_pool()
    assert await config.create_pool() is pool
    assert await config.provide_pool() is pool
    assert config.created == 1
    assert config.pool_config == {"host": "localhost"}


async def test_close_pool_resets_instance() -> None:
    config = DummyConfig()
    pool = await config.create_pool()
    await config.close_pool()
    pool.close.assert_awaited_once()
    assert config.pool_instance is None
    await config.close_pool()


async def test_existing_pool_instance_is_reused() -> None:
    pool = AsyncMock()
    config = DummyConfig(pool_instance=pool)
    assert await config.provide_pool() is pool
    assert config.created == 0


def test_env_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROWSPEC_TEST_INT", "42")
    monkeypatch.setenv("ROWSPEC_TEST_BAD_INT", "forty")
    monkeypatch.setenv("ROWSPEC_TEST_BOOL", "yes")
    monkeypatch.delenv("ROWSPEC_TEST_MISSING", raising=False)

    assert env_int("ROWSPEC_TEST_INT") == 42
    assert env_int("ROWSPEC_TEST_BAD_INT", 7) == 7
    assert env_int("ROWSPEC_TEST_MISSING") is None
    assert env_bool("ROWSPEC_TEST_BOOL", False) is True
    assert env_bool("ROWSPEC_TEST_MISSING", True) is True
