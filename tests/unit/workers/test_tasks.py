"""Tests for Celery schedule and task entry points."""

from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from celery.schedules import crontab
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from hotnews.config.sources import HackerNewsConfig, RetentionConfig
from hotnews.core.container import ApplicationContainer, create_container
from hotnews.infrastructure.http_client import HTTPClient
from hotnews.models.item import Item, ItemKind
from hotnews.models.source import Source, SourceType
from hotnews.services.collector.sources.hackernews import HN_NEW_STORIES, HN_TOP_STORIES
from hotnews.workers.celery_app import BEAT_SCHEDULE, celery_app
from hotnews.workers.cleanup import cleanup_old_items, run_cleanup
from hotnews.workers.collect import (
    _as_task_result,
    collect_github,
    collect_hackernews,
    collect_rss,
    run_collection,
)


class TestBeatSchedule:
    """Tests for the Beat schedule."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("entry", "task", "schedule"),
        [
            ("collect-hackernews", collect_hackernews, crontab(minute="*/10")),
            ("collect-rss", collect_rss, crontab(minute="*/30")),
            ("collect-github", collect_github, crontab(minute=0)),
            ("cleanup-old-items", cleanup_old_items, crontab(minute=0, hour=3)),
        ],
    )
    def test_schedule_entries(self, entry: str, task: Any, schedule: crontab):
        assert BEAT_SCHEDULE[entry]["task"] == task.name
        assert BEAT_SCHEDULE[entry]["schedule"] == schedule

    @pytest.mark.unit
    def test_app_configuration(self):
        assert celery_app.conf.beat_schedule == BEAT_SCHEDULE
        assert celery_app.conf.timezone == "UTC"
        assert celery_app.conf.task_routes["hotnews.workers.collect.*"] == {"queue": "collect"}


@pytest.fixture
def http_client() -> HTTPClient:
    client = MagicMock(spec=HTTPClient)
    client.get = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def app_container(db_engine: AsyncEngine, http_client: HTTPClient) -> ApplicationContainer:
    """Container wired to the test database and a mocked HTTP client."""
    test_container = create_container()
    test_container.infrastructure.db_engine.override(db_engine)
    test_container.infrastructure.http_client.override(http_client)
    test_container.configs.hackernews_config.override(HackerNewsConfig(batch_delay=0))
    return test_container


def _response(payload: Any) -> MagicMock:
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = payload
    return response


class TestRunCollection:
    """Tests for run_collection()."""

    @pytest.mark.asyncio
    async def test_collects_and_commits(
        self,
        app_container: ApplicationContainer,
        http_client: MagicMock,
        db_session_factory: async_sessionmaker[AsyncSession],
    ):
        story = {
            "id": 1,
            "type": "story",
            "title": "Anthropic releases a new Claude model",
            "url": "https://example.com/claude",
            "score": 90,
            "by": "dang",
            "time": int(datetime.now(UTC).timestamp()),
            "descendants": 12,
        }

        async def _get(url: str, **kwargs: Any) -> MagicMock:
            if url == HN_TOP_STORIES:
                return _response([1])
            if url == HN_NEW_STORIES:
                return _response([])
            return _response(story)

        http_client.get.side_effect = _get

        result = await run_collection(SourceType.HACKERNEWS, app_container)

        assert result.inserted_count == 1
        assert _as_task_result(result)["processed_count"] == 1
        http_client.close.assert_not_awaited()

        async with db_session_factory() as session:
            titles = list((await session.execute(select(Item.title))).scalars())
        assert titles == ["Anthropic releases a new Claude model"]


class TestRunCleanup:
    """Tests for run_cleanup()."""

    @pytest.mark.asyncio
    async def test_sweeps_and_commits(
        self,
        app_container: ApplicationContainer,
        db_session_factory: async_sessionmaker[AsyncSession],
    ):
        app_container.configs.retention_config.override(RetentionConfig(batch_size=10))
        now = datetime.now(UTC)
        async with db_session_factory() as session:
            source = Source(
                key="hackernews",
                name="Hacker News",
                type=SourceType.HACKERNEWS,
                config={},
                base_importance=7,
            )
            session.add(source)
            await session.flush()
            for days in (1, 45):
                session.add(
                    Item(
                        source_id=source.id,
                        external_id=str(days),
                        kind=ItemKind.DISCUSSION,
                        title=f"{days} days old",
                        url=f"https://example.com/{days}",
                        published_at=now - timedelta(days=days),
                        collected_at=now - timedelta(days=days),
                        importance_score=10,
                        content_hash=str(days),
                        tags=["AI"],
                    )
                )
            await session.commit()

        deleted = await run_cleanup(app_container)

        assert deleted == 1
        async with db_session_factory() as session:
            titles = list((await session.execute(select(Item.title))).scalars())
        assert titles == ["1 days old"]
