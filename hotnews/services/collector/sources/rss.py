"""RSS/Atom feed source collector.

Collects entries from the configured publisher feeds. By default feeds are
converted to JSON by the rss2json API; with parser="feedparser" they are
downloaded and parsed locally.
"""

import asyncio
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

import feedparser
import httpx
from pydantic import ValidationError

from hotnews.config.sources import RSSConfig, RSSFeed
from hotnews.core.exceptions import ExternalAPIError
from hotnews.core.logging import get_logger
from hotnews.core.types import ensure_utc
from hotnews.infrastructure.http_client import HTTPClient
from hotnews.models.item import ItemKind
from hotnews.models.source import SourceType
from hotnews.services.collector.base import BaseSource, RawItem, SourceSpec
from hotnews.services.collector.classifier import extract_entities
from hotnews.services.collector.normalizer import feed_external_id
from hotnews.services.collector.scorer import ImportanceScorer

logger = get_logger(__name__)


def source_key(feed_url: str) -> str:
    """Source key of a feed."""
    return f"rss:{feed_url}"


def parse_pub_date(value: Any, now: datetime) -> datetime:
    """Parse a feed date string, falling back to now.

    Accepts ISO 8601 ("2024-01-15 10:30:00", as rss2json emits) and
    RFC 822 ("Mon, 15 Jan 2024 10:30:00 GMT"). Naive values are UTC.
    """
    if not isinstance(value, str) or not value.strip():
        return now
    text = value.strip()
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        pass
    try:
        return ensure_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError):
        logger.debug("Unparseable feed date", value=text)
        return now


class RSSSource(BaseSource[RSSConfig]):
    """RSS/Atom feed source collector.

    Each configured feed is its own Source row (key "rss:<feed url>").
    Stored entries are immutable: a re-sighted entry is left untouched.
    """

    source_type = SourceType.RSS
    config_class = RSSConfig

    def __init__(
        self,
        config: RSSConfig,
        http_client: HTTPClient,
        scorer: ImportanceScorer | None = None,
    ) -> None:
        super().__init__(config, http_client)
        self._scorer = scorer or ImportanceScorer()

    def spec_for(self, feed: RSSFeed) -> SourceSpec:
        """Source row for a feed."""
        return SourceSpec(
            key=source_key(feed.url),
            name=feed.name,
            type=SourceType.RSS,
            base_importance=feed.base_importance,
            config={
                "url": feed.url,
                "category": feed.category,
                "poll_interval_minutes": self._config.poll_interval_minutes,
            },
        )

    async def collect(self) -> list[RawItem]:
        """Collect entries from every configured feed.

        A failing feed is logged and skipped; the remaining feeds are
        still collected.

        Returns:
            List of RawItem across all feeds
        """
        logger.info(
            "Collecting from RSS feeds",
            feeds=len(self._config.feeds),
            parser=self._config.parser,
        )

        items: list[RawItem] = []
        for index, feed in enumerate(self._config.feeds):
            now = datetime.now(UTC)
            entries = await self._fetch_entries(feed)
            converted = [
                item
                for entry in entries[: self._config.entries_per_feed]
                if (item := self._to_raw_item(entry, feed, now)) is not None
            ]
            items.extend(converted)
            logger.debug("Feed collected", feed=feed.name, entries=len(converted))

            if index + 1 < len(self._config.feeds) and self._config.feed_delay > 0:
                await asyncio.sleep(self._config.feed_delay)

        logger.info("RSS collection complete", collected=len(items))
        return items

    async def _fetch_entries(self, feed: RSSFeed) -> list[dict[str, Any]]:
        """Fetch one feed's entries as plain dicts; failures yield []."""
        try:
            if self._config.parser == "feedparser":
                return await self._fetch_with_feedparser(feed)
            return await self._fetch_with_converter(feed)
        except (httpx.HTTPError, ValueError, ExternalAPIError) as e:
            logger.warning("RSS feed fetch failed", feed=feed.name, url=feed.url, error=str(e))
            return []

    async def _fetch_with_converter(self, feed: RSSFeed) -> list[dict[str, Any]]:
        """Fetch a feed through the rss2json conversion API.

        Raises:
            ExternalAPIError: If the converter reports a non-ok status
        """
        response = await self._http_client.get(
            self._config.converter_url, params={"rss_url": feed.url}
        )
        response.raise_for_status()
        data = response.json()

        if not isinstance(data, dict) or data.get("status") != "ok":
            message = data.get("message") if isinstance(data, dict) else None
            raise ExternalAPIError(
                service="rss2json",
                message=message or "Unknown error",
                status_code=response.status_code,
                endpoint=feed.url,
            )

        entries = data.get("items") or []
        return [
            {
                "title": entry.get("title"),
                "link": entry.get("link"),
                "content": entry.get("content") or entry.get("description"),
                "author": entry.get("author"),
                "published": entry.get("pubDate"),
            }
            for entry in entries
            if isinstance(entry, dict)
        ]

    async def _fetch_with_feedparser(self, feed: RSSFeed) -> list[dict[str, Any]]:
        """Download a feed and parse it with feedparser."""
        response = await self._http_client.get(feed.url)
        response.raise_for_status()
        parsed = feedparser.parse(response.text)

        if parsed.bozo and parsed.bozo_exception:
            logger.warning(
                "Feed parsing had issues",
                feed=feed.name,
                error=str(parsed.bozo_exception),
            )

        entries: list[dict[str, Any]] = []
        for entry in parsed.entries:
            content = None
            if entry.get("content"):
                content = entry.content[0].get("value")
            else:
                content = entry.get("summary") or entry.get("description")

            published: Any = entry.get("published") or entry.get("updated")
            struct = entry.get("published_parsed") or entry.get("updated_parsed")
            if struct:
                published = datetime(*struct[:6], tzinfo=UTC).isoformat()

            entries.append(
                {
                    "title": entry.get("title"),
                    "link": entry.get("link") or entry.get("id"),
                    "content": content,
                    "author": entry.get("author"),
                    "published": published,
                }
            )
        return entries

    def _to_raw_item(self, entry: dict[str, Any], feed: RSSFeed, now: datetime) -> RawItem | None:
        """Convert a feed entry to RawItem.

        Args:
            entry: Entry with title, link, content, author, published
            feed: Feed the entry came from
            now: Fallback publication time

        Returns:
            RawItem or None if the entry lacks a title/link or is malformed
        """
        try:
            title = (entry.get("title") or "").strip()
            link = (entry.get("link") or "").strip()
            if not title or not link:
                logger.debug("Skipping RSS entry without title or link", feed=feed.name)
                return None

            return RawItem(
                source=self.spec_for(feed),
                external_id=feed_external_id(link),
                kind=ItemKind.ARTICLE,
                title=title,
                url=link,
                author=entry.get("author") or None,
                body=entry.get("content"),
                published_at=parse_pub_date(entry.get("published"), now),
                entities=extract_entities(title),
            )
        except (ValidationError, TypeError, AttributeError) as e:
            logger.debug("Skipping malformed RSS entry", feed=feed.name, error=str(e))
            return None

    def score(self, raw: RawItem, base_importance: int, now: datetime) -> int:
        return self._scorer.score_feed_entry(
            base_importance=base_importance,
            published_at=raw.published_at,
            entity_count=len(raw.entities),
            now=now,
        )


__all__ = ["RSSSource", "parse_pub_date", "source_key"]
