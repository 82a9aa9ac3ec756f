from collections.abc import AsyncGenerator

import pytest
from pytest_databases.docker.mysql import MySQLService

from rowspec.adapters.asyncmy import AsyncmyConfig
from rowspec.engine import RowEngine


@pytest.fixture
async def asyncmy_config(mysql_service: MySQLService) -> AsyncGenerator[AsyncmyConfig, None]:
    config = AsyncmyConfig(
        pool_config={
            "host": mysql_service.host,
            "port": mysql_service.port,
            "user": mysql_service.user,
            "password": mysql_service.password,
            "database": mysql_service.db,
            "minsize": 1,
            "maxsize": 5,
        }
    )
    yield config
    await config.close_pool()


@pytest.fixture
async def row_engine(asyncmy_config: AsyncmyConfig) -> AsyncGenerator[RowEngine, None]:
    async with RowEngine(asyncmy_config) as engine:
        await engine.query("DROP TABLE IF EXISTS `users`")
        await engine.query("DROP TABLE IF EXISTS `subscribers`")
        await engine.query("DROP TABLE IF EXISTS `events`")
        await engine.query(
            """
            CREATE TABLE `users` (
                id INT AUTO_INCREMENT PRIMARY KEY,
                email VARCHAR(255) NOT NULL UNIQUE,
                name VARCHAR(255) NULL,
                profile JSON NULL
            )
            """
        )
        await engine.query(
            "CREATE TABLE `subscribers` (email VARCHAR(255) NOT NULL UNIQUE, topic VARCHAR(64) NOT NULL)"
        )
        await engine.query("CREATE TABLE `events` (kind VARCHAR(32) NOT NULL, payload VARCHAR(255) NOT NULL)")
        yield engine
        await engine.query("DROP TABLE IF EXISTS `users`")
        await engine.query("DROP TABLE IF EXISTS `subscribers`")
        await engine.query("DROP TABLE IF EXISTS `events`")
