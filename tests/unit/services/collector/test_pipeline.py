"""Unit tests for the collection pipeline against an in-memory database."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotnews.config.sources import GitHubConfig, HackerNewsConfig, RSSConfig, RSSFeed
from hotnews.core.exceptions import CollectionError
from hotnews.infrastructure.http_client import HTTPClient
from hotnews.models.item import Item
from hotnews.models.source import Source, SourceType
from hotnews.services.collector.pipeline import CollectionPipeline
from hotnews.services.collector.sources import GitHubSource, HackerNewsSource, RSSSource
from hotnews.services.collector.sources.hackernews import HN_NEW_STORIES, HN_TOP_STORIES

PUBLISHED = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)

FEED = RSSFeed(
    name="OpenAI Blog",
    url="https://openai.com/blog/rss.xml",
    category="ai_specific",
    base_importance=9,
)


def ticking_clock(start: datetime = PUBLISHED) -> Callable[[], datetime]:
    """Clock advancing one second per call."""
    state = {"now": start}

    def _now() -> datetime:
        current = state["now"]
        state["now"] = current + timedelta(seconds=1)
        return current

    return _now


def story(story_id: int, **overrides: Any) -> dict[str, Any]:
    data = {
        "id": story_id,
        "type": "story",
        "title": "OpenAI launches GPT-5",
        "url": f"https://example.com/story-{story_id}",
        "score": 150,
        "by": "pg",
        "time": int(PUBLISHED.timestamp()),
        "descendants": 40,
    }
    data.update(overrides)
    return data


@pytest.fixture
def http_client() -> HTTPClient:
    return MagicMock(spec=HTTPClient)


@pytest.fixture
def hn(http_client: HTTPClient) -> HackerNewsSource:
    return HackerNewsSource(HackerNewsConfig(), http_client=http_client)


@pytest.fixture
def rss(http_client: HTTPClient) -> RSSSource:
    return RSSSource(RSSConfig(feeds=[FEED]), http_client=http_client)


@pytest.fixture
def github(http_client: HTTPClient) -> GitHubSource:
    return GitHubSource(GitHubConfig(), http_client=http_client)


@pytest.fixture
def pipeline(db_session: AsyncSession) -> CollectionPipeline:
    return CollectionPipeline(db_session, clock=ticking_clock())


async def all_items(session: AsyncSession) -> list[Item]:
    result = await session.execute(select(Item).order_by(Item.collected_at))
    return list(result.scalars())


class TestCollectionPipelineInsert:
    """Tests for first sightings."""

    @pytest.mark.asyncio
    async def test_inserts_scored_and_tagged_items(
        self, pipeline: CollectionPipeline, hn: HackerNewsSource, db_session: AsyncSession
    ):
        hn.collect = AsyncMock(return_value=[hn._to_raw_item(story(1))])

        result = await pipeline.run(hn)
        await db_session.commit()

        assert result.source_type == SourceType.HACKERNEWS
        assert result.collected_count == 1
        assert result.inserted_count == 1
        assert result.processed_count == 1
        assert result.errors == []

        [item] = await all_items(db_session)
        assert item.external_id == "1"
        assert item.importance_score == 46
        assert item.tags == ["LLM", "OpenAI"]
        assert item.canonical_item_id is None
        assert item.collected_at == PUBLISHED

    @pytest.mark.asyncio
    async def test_creates_source_once_and_marks_polled(
        self, pipeline: CollectionPipeline, hn: HackerNewsSource, db_session: AsyncSession
    ):
        hn.collect = AsyncMock(return_value=[hn._to_raw_item(story(1)), hn._to_raw_item(story(2))])

        await pipeline.run(hn)
        await pipeline.run(hn)
        await db_session.commit()

        sources = list((await db_session.execute(select(Source))).scalars())
        assert len(sources) == 1
        assert sources[0].key == "hackernews"
        assert sources[0].base_importance == 7
        assert sources[0].last_polled_at is not None

    @pytest.mark.asyncio
    async def test_each_feed_is_its_own_source(
        self, pipeline: CollectionPipeline, http_client: HTTPClient, db_session: AsyncSession
    ):
        second = RSSFeed(name="The Batch", url="https://www.deeplearning.ai/the-batch/feed/")
        rss = RSSSource(RSSConfig(feeds=[FEED, second]), http_client=http_client)
        rss.collect = AsyncMock(
            return_value=[
                rss._to_raw_item({"title": "A", "link": "https://openai.com/a"}, FEED, PUBLISHED),
                rss._to_raw_item({"title": "B", "link": "https://x.ai/b"}, second, PUBLISHED),
            ]
        )

        await pipeline.run(rss)
        await db_session.commit()

        keys = set((await db_session.execute(select(Source.key))).scalars())
        assert keys == {f"rss:{FEED.url}", f"rss:{second.url}"}


class TestCollectionPipelineIdempotence:
    """Tests for re-sightings."""

    @pytest.mark.asyncio
    async def test_second_run_inserts_nothing(
        self, pipeline: CollectionPipeline, hn: HackerNewsSource, db_session: AsyncSession
    ):
        hn.collect = AsyncMock(return_value=[hn._to_raw_item(story(1)), hn._to_raw_item(story(2))])

        await pipeline.run(hn)
        second = await pipeline.run(hn)
        await db_session.commit()

        assert second.inserted_count == 0
        assert second.processed_count == 2
        count = await db_session.scalar(select(func.count(Item.id)))
        assert count == 2

    @pytest.mark.asyncio
    async def test_discussion_engagement_is_refreshed(
        self, pipeline: CollectionPipeline, hn: HackerNewsSource, db_session: AsyncSession
    ):
        hn.collect = AsyncMock(return_value=[hn._to_raw_item(story(1))])
        await pipeline.run(hn)

        hn.collect = AsyncMock(return_value=[hn._to_raw_item(story(1, score=300, descendants=90))])
        result = await pipeline.run(hn)
        await db_session.commit()

        assert result.updated_count == 1
        [item] = await all_items(db_session)
        assert item.score == 300
        assert item.comments_count == 90
        assert item.importance_score > 46

    @pytest.mark.asyncio
    async def test_feed_entries_are_immutable(
        self, pipeline: CollectionPipeline, rss: RSSSource, db_session: AsyncSession
    ):
        link = "https://openai.com/blog/agents"
        rss.collect = AsyncMock(
            return_value=[rss._to_raw_item({"title": "Agents", "link": link}, FEED, PUBLISHED)]
        )
        await pipeline.run(rss)

        rss.collect = AsyncMock(
            return_value=[rss._to_raw_item({"title": "Agents v2", "link": link}, FEED, PUBLISHED)]
        )
        result = await pipeline.run(rss)
        await db_session.commit()

        assert result.unchanged_count == 1
        [item] = await all_items(db_session)
        assert item.title == "Agents"

    @pytest.mark.asyncio
    async def test_trending_repo_refreshed_on_star_jump(
        self, pipeline: CollectionPipeline, github: GitHubSource, db_session: AsyncSession
    ):
        repo = {
            "full_name": "acme/agentkit",
            "html_url": "https://github.com/acme/agentkit",
            "description": "Agents",
            "created_at": "2026-10-15T00:00:00Z",
            "stargazers_count": 320,
            "forks_count": 1,
            "topics": ["llm"],
        }
        github.collect = AsyncMock(return_value=[github._repo_to_raw_item(repo)])
        await pipeline.run(github)

        github.collect = AsyncMock(
            return_value=[github._repo_to_raw_item({**repo, "stargazers_count": 325})]
        )
        small = await pipeline.run(github)

        github.collect = AsyncMock(
            return_value=[github._repo_to_raw_item({**repo, "stargazers_count": 500})]
        )
        large = await pipeline.run(github)
        await db_session.commit()

        assert small.unchanged_count == 1
        assert large.updated_count == 1
        [item] = await all_items(db_session)
        assert item.score == 500
        assert item.importance_score == 80


class TestCollectionPipelineDedup:
    """Tests for cross-source duplicate linkage."""

    @pytest.mark.asyncio
    async def test_same_story_from_two_sources_is_linked(
        self,
        pipeline: CollectionPipeline,
        hn: HackerNewsSource,
        rss: RSSSource,
        db_session: AsyncSession,
    ):
        url = "https://openai.com/blog/gpt-5"
        hn.collect = AsyncMock(
            return_value=[hn._to_raw_item(story(1, title="Introducing GPT-5", url=url))]
        )
        rss.collect = AsyncMock(
            return_value=[
                rss._to_raw_item(
                    {"title": "Introducing GPT-5!", "link": f"{url}/?utm_source=rss"},
                    FEED,
                    PUBLISHED,
                )
            ]
        )

        await pipeline.run(hn)
        result = await pipeline.run(rss)
        await db_session.commit()

        assert result.inserted_count == 1
        assert result.duplicate_count == 1
        canonical, duplicate = await all_items(db_session)
        assert canonical.canonical_item_id is None
        assert duplicate.canonical_item_id == canonical.id
        assert duplicate.content_hash == canonical.content_hash

    @pytest.mark.asyncio
    async def test_link_survives_resighting(
        self,
        pipeline: CollectionPipeline,
        hn: HackerNewsSource,
        rss: RSSSource,
        db_session: AsyncSession,
    ):
        url = "https://openai.com/blog/gpt-5"
        hn.collect = AsyncMock(return_value=[hn._to_raw_item(story(1, title="GPT-5", url=url))])
        rss.collect = AsyncMock(
            return_value=[rss._to_raw_item({"title": "GPT-5", "link": url}, FEED, PUBLISHED)]
        )

        await pipeline.run(hn)
        await pipeline.run(rss)
        await pipeline.run(rss)
        await db_session.commit()

        _, duplicate = await all_items(db_session)
        assert duplicate.canonical_item_id is not None


class TestCollectionPipelineFailures:
    """Tests for failure handling."""

    @pytest.mark.asyncio
    async def test_collector_exception_becomes_collection_error(
        self, pipeline: CollectionPipeline, hn: HackerNewsSource
    ):
        hn.collect = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(CollectionError) as exc_info:
            await pipeline.run(hn)

        assert exc_info.value.source_type == "hackernews"

    @pytest.mark.asyncio
    async def test_empty_collection(self, pipeline: CollectionPipeline, hn: HackerNewsSource):
        hn.collect = AsyncMock(return_value=[])

        result = await pipeline.run(hn)

        assert result.collected_count == 0
        assert result.processed_count == 0

    @pytest.mark.asyncio
    async def test_malformed_story_does_not_abort_run(
        self, pipeline: CollectionPipeline, http_client: HTTPClient, db_session: AsyncSession
    ):
        lists = {HN_TOP_STORIES: [1, 2], HN_NEW_STORIES: []}
        stories = {1: story(1), 2: story(2, by=12345)}

        async def _get(url: str, **kwargs: Any):
            response = MagicMock()
            if url in lists:
                response.json.return_value = lists[url]
            else:
                response.json.return_value = stories[int(url.rsplit("/", 1)[1].split(".")[0])]
            return response

        http_client.get.side_effect = _get
        source = HackerNewsSource(HackerNewsConfig(batch_delay=0), http_client=http_client)

        result = await pipeline.run(source)
        await db_session.commit()

        assert result.collected_count == 1
        assert result.inserted_count == 1
        [item] = await all_items(db_session)
        assert item.external_id == "1"
        hn_source = await db_session.scalar(select(Source).where(Source.key == "hackernews"))
        assert hn_source.last_polled_at is not None
