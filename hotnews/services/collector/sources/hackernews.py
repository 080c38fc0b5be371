"""Hacker News source collector.

Collects AI-related stories from Hacker News using the official Firebase API.
https://github.com/HackerNews/API
"""

import asyncio
from datetime import UTC, datetime
from typing import Any

import httpx
from pydantic import ValidationError

from hotnews.config.sources import HackerNewsConfig
from hotnews.core.logging import get_logger
from hotnews.infrastructure.http_client import HTTPClient
from hotnews.models.item import Item, ItemKind
from hotnews.models.source import SourceType
from hotnews.services.collector.base import BaseSource, RawItem, SourceSpec
from hotnews.services.collector.classifier import extract_entities, is_relevant
from hotnews.services.collector.scorer import ImportanceScorer

logger = get_logger(__name__)

# HN API endpoints
HN_API_BASE = "https://hacker-news.firebaseio.com/v0"
HN_TOP_STORIES = HN_API_BASE + "/topstories.json"
HN_NEW_STORIES = HN_API_BASE + "/newstories.json"
HN_ITEM_TEMPLATE = HN_API_BASE + "/item/{id}.json"
HN_DISCUSSION_TEMPLATE = "https://news.ycombinator.com/item?id={id}"

SOURCE_KEY = "hackernews"


class HackerNewsSource(BaseSource[HackerNewsConfig]):
    """Hacker News source collector.

    Merges the top and new story lists, fetches story details in
    concurrent batches and keeps AI-relevant stories. Stored stories are
    refreshed with new points and comment counts on every sighting.

    Config options:
        top_limit / new_limit: Ids taken from each list (default: 100 / 50)
        max_stories: Cap on the merged id list (default: 150)
        batch_size: Concurrent detail fetches (default: 20)
        batch_delay: Pause between batches (default: 0.1s)
    """

    source_type = SourceType.HACKERNEWS
    config_class = HackerNewsConfig

    def __init__(
        self,
        config: HackerNewsConfig,
        http_client: HTTPClient,
        scorer: ImportanceScorer | None = None,
    ) -> None:
        super().__init__(config, http_client)
        self._scorer = scorer or ImportanceScorer()

    @property
    def spec(self) -> SourceSpec:
        """Source row this collector writes to."""
        return SourceSpec(
            key=SOURCE_KEY,
            name=self._config.name,
            type=SourceType.HACKERNEWS,
            base_importance=self._config.base_importance,
            config={"poll_interval_minutes": self._config.poll_interval_minutes},
        )

    async def collect(self) -> list[RawItem]:
        """Collect AI-related stories from Hacker News.

        Returns:
            List of RawItem from HN
        """
        logger.info(
            "Collecting from Hacker News",
            top_limit=self._config.top_limit,
            new_limit=self._config.new_limit,
        )

        story_ids = await self._fetch_story_ids()
        stories = await self._fetch_stories(story_ids)

        items: list[RawItem] = []
        for story in stories:
            if not self._is_candidate(story):
                continue
            item = self._to_raw_item(story)
            if item:
                items.append(item)

        logger.info(
            "Hacker News collection complete",
            relevant=len(items),
            fetched=len(stories),
        )
        return items

    async def _fetch_story_ids(self) -> list[int]:
        """Merge top and new story ids, top first, without repeats."""
        top_ids = await self._fetch_id_list(HN_TOP_STORIES)
        new_ids = await self._fetch_id_list(HN_NEW_STORIES)

        merged = dict.fromkeys(top_ids[: self._config.top_limit])
        merged.update(dict.fromkeys(new_ids[: self._config.new_limit]))
        return list(merged)[: self._config.max_stories]

    async def _fetch_id_list(self, url: str) -> list[int]:
        """Fetch a story id list; failures yield an empty list."""
        try:
            response = await self._http_client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to fetch HN story list", url=url, error=str(e))
            return []

        if not isinstance(data, list):
            logger.warning("Unexpected HN story list payload", url=url)
            return []
        return [story_id for story_id in data if isinstance(story_id, int)]

    async def _fetch_stories(self, story_ids: list[int]) -> list[dict[str, Any]]:
        """Fetch story details in concurrent batches.

        Args:
            story_ids: Ids to fetch

        Returns:
            Story payloads that could be fetched
        """
        batch_size = self._config.batch_size
        stories: list[dict[str, Any]] = []

        for start in range(0, len(story_ids), batch_size):
            batch = story_ids[start : start + batch_size]
            results = await asyncio.gather(*(self._fetch_story(sid) for sid in batch))
            stories.extend(story for story in results if story)

            if start + batch_size < len(story_ids) and self._config.batch_delay > 0:
                await asyncio.sleep(self._config.batch_delay)

        return stories

    async def _fetch_story(self, story_id: int) -> dict[str, Any] | None:
        """Fetch a single story by ID.

        Args:
            story_id: HN story ID

        Returns:
            Story data, or None if missing or the fetch failed
        """
        url = HN_ITEM_TEMPLATE.format(id=story_id)
        try:
            response = await self._http_client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to fetch HN story", story_id=story_id, error=str(e))
            return None

        if data is None:
            logger.debug("HN story not found", story_id=story_id)
            return None
        if not isinstance(data, dict):
            return None
        return data

    def _is_candidate(self, story: dict[str, Any]) -> bool:
        """Stories with a title that mention an AI keyword."""
        title = story.get("title")
        if story.get("type") != "story" or not title or not isinstance(title, str):
            return False
        text = story.get("text")
        return is_relevant(title, text if isinstance(text, str) else None)

    def _to_raw_item(self, story: dict[str, Any]) -> RawItem | None:
        """Convert HN story to RawItem.

        Args:
            story: HN story data

        Returns:
            RawItem or None if the story is malformed
        """
        story_id = story.get("id")
        timestamp = story.get("time")
        if story_id is None or not isinstance(timestamp, int | float):
            logger.debug("Skipping malformed HN story", story_id=story_id)
            return None

        discussion_url = HN_DISCUSSION_TEMPLATE.format(id=story_id)
        title = story["title"]

        try:
            return RawItem(
                source=self.spec,
                external_id=str(story_id),
                kind=ItemKind.DISCUSSION,
                title=title,
                # Text posts (Ask HN, Show HN) have no external URL
                url=story.get("url") or discussion_url,
                author=story.get("by"),
                body=story.get("text"),
                published_at=datetime.fromtimestamp(timestamp, tz=UTC),
                score=story.get("score"),
                comments_count=story.get("descendants") or 0,
                comments_url=discussion_url,
                entities=extract_entities(title),
            )
        except (
            ValidationError, TypeError, AttributeError, ValueError, OverflowError, OSError
        ) as e:
            logger.debug("Skipping malformed HN story", story_id=story_id, error=str(e))
            return None

    def score(self, raw: RawItem, base_importance: int, now: datetime) -> int:
        return self._scorer.score_discussion(
            base_importance=base_importance,
            points=raw.score,
            comments=raw.comments_count,
            published_at=raw.published_at,
            entity_count=len(raw.entities),
            now=now,
        )

    def refresh(self, item: Item, raw: RawItem, base_importance: int, now: datetime) -> bool:
        """Refresh engagement; importance is rescored from the stored publish time."""
        importance = self._scorer.score_discussion(
            base_importance=base_importance,
            points=raw.score,
            comments=raw.comments_count,
            published_at=item.published_at,
            entity_count=len(raw.entities),
            now=now,
        )
        before = (item.score, item.comments_count, item.importance_score)
        item.score = raw.score
        item.comments_count = raw.comments_count
        item.importance_score = importance
        return before != (item.score, item.comments_count, item.importance_score)


__all__ = ["HackerNewsSource"]
