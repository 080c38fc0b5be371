"""Tests for hotnews.core.container module."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from hotnews.config.sources import GitHubConfig, HackerNewsConfig
from hotnews.core.cache import TTLCache
from hotnews.core.config import Config
from hotnews.core.container import TaskScope, create_container


@pytest.fixture
def app_container():
    test_container = create_container()
    test_container.config.override(
        Config(
            _env_file=None,
            database_url="sqlite+aiosqlite:///:memory:",
            github_token="ghp_test",
            query_cache_ttl_seconds=60,
        )
    )
    yield test_container
    test_container.config.reset_override()


@pytest.mark.unit
def test_singletons(app_container):
    assert isinstance(app_container.query_cache(), TTLCache)
    assert app_container.query_cache() is app_container.query_cache()
    assert app_container.query_cache().ttl_seconds == 60


@pytest.mark.unit
def test_collector_configs(app_container):
    assert isinstance(app_container.configs.hackernews_config(), HackerNewsConfig)
    github = app_container.configs.github_config()
    assert isinstance(github, GitHubConfig)
    assert github.token == "ghp_test"


@pytest.mark.asyncio
async def test_task_scope_releases_created_resources(app_container):
    http_client = MagicMock()
    http_client.close = AsyncMock()

    infrastructure = app_container.infrastructure
    infrastructure.http_client.override(http_client)
    async with TaskScope(app_container) as scope:
        assert scope is app_container
    http_client.close.assert_not_awaited()
    infrastructure.http_client.reset_override()

    async with TaskScope(app_container) as scope:
        created_client = scope.infrastructure.http_client()
        scope.infrastructure.db_engine()

    assert created_client._client.is_closed
