"""Trending and ranking queries.

Read-only views over stored items. Every ranked result excludes items that
point at a canonical item, so a story reported by several sources appears
once.
"""

import uuid
from datetime import UTC, datetime, timedelta

from sqlalchemy import Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from hotnews.core.logging import get_logger
from hotnews.core.types import ensure_utc
from hotnews.models.item import Item
from hotnews.models.source import Source, SourceType
from hotnews.services.feed.schemas import FeedItem, FeedPage, FeedStats, SourceStats

logger = get_logger(__name__)

TRENDING_WINDOW = timedelta(hours=6)
TRENDING_POOL_SIZE = 100
STATS_WINDOW = timedelta(hours=24)


def velocity(item: Item, now: datetime) -> float:
    """Engagement per hour since collection (at least one hour).

    velocity = (score + 2 * comments) / max(1, hours since collected)
    """
    hours = (ensure_utc(now) - ensure_utc(item.collected_at)).total_seconds() / 3600
    engagement = (item.score or 0) + 2 * (item.comments_count or 0)
    return engagement / max(1.0, hours)


class FeedQueryService:
    """Ranked reads for the news API.

    Attributes:
        session: Database session
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _canonical_items(self) -> Select[tuple[Item]]:
        return (
            select(Item)
            .options(joinedload(Item.source))
            .where(Item.canonical_item_id.is_(None))
        )

    async def _fetch(self, stmt: Select[tuple[Item]]) -> list[Item]:
        result = await self.session.execute(stmt)
        return list(result.scalars().unique())

    async def get_feed(self, limit: int = 30, min_score: int = 0) -> FeedPage:
        """Top items by importance.

        Args:
            limit: Page size
            min_score: Minimum importance score

        Returns:
            FeedPage with has_more set when more items qualify
        """
        stmt = (
            self._canonical_items()
            .where(Item.importance_score >= min_score)
            .order_by(Item.importance_score.desc(), Item.published_at.desc(), Item.id)
            .limit(limit + 1)
        )
        items = await self._fetch(stmt)
        has_more = len(items) > limit
        return FeedPage(
            items=[FeedItem.from_item(item) for item in items[:limit]],
            has_more=has_more,
        )

    async def get_recent(
        self,
        limit: int = 50,
        hours_ago: int = 24,
        now: datetime | None = None,
    ) -> list[FeedItem]:
        """Items published within the last hours_ago hours, newest first."""
        now = now or datetime.now(UTC)
        cutoff = now - timedelta(hours=hours_ago)
        stmt = (
            self._canonical_items()
            .where(Item.published_at >= cutoff)
            .order_by(Item.published_at.desc(), Item.id)
            .limit(limit)
        )
        return [FeedItem.from_item(item) for item in await self._fetch(stmt)]

    async def get_trending(self, limit: int = 10, now: datetime | None = None) -> list[FeedItem]:
        """Items with the highest engagement velocity.

        The candidate pool is the 100 most recently collected items of the
        last 6 hours; items without engagement are dropped.

        Args:
            limit: Maximum results
            now: Reference time (defaults to current UTC time)

        Returns:
            Items annotated with velocity, highest first
        """
        now = now or datetime.now(UTC)
        stmt = (
            self._canonical_items()
            .where(Item.collected_at >= now - TRENDING_WINDOW)
            .order_by(Item.collected_at.desc(), Item.id)
            .limit(TRENDING_POOL_SIZE)
        )
        pool = await self._fetch(stmt)

        scored = [(velocity(item, now), item) for item in pool if (item.score or 0) > 0]
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [FeedItem.from_item(item, velocity=v) for v, item in scored[:limit]]

    async def get_by_source(self, source_type: SourceType | str, limit: int = 20) -> list[FeedItem]:
        """Top items by importance from sources of one type.

        Unknown source types return an empty list.
        """
        try:
            resolved = SourceType(source_type)
        except ValueError:
            logger.debug("Unknown source type requested", source_type=str(source_type))
            return []

        stmt = (
            self._canonical_items()
            .join(Source, Item.source_id == Source.id)
            .where(Source.type == resolved)
            .order_by(Item.importance_score.desc(), Item.published_at.desc(), Item.id)
            .limit(limit)
        )
        return [FeedItem.from_item(item) for item in await self._fetch(stmt)]

    async def get_by_id(self, item_id: uuid.UUID) -> FeedItem | None:
        """A single item (duplicates included), or None when absent."""
        stmt = select(Item).options(joinedload(Item.source)).where(Item.id == item_id)
        result = await self.session.execute(stmt)
        item = result.scalars().first()
        return FeedItem.from_item(item) if item else None

    async def get_stats(self, now: datetime | None = None) -> FeedStats:
        """Item counts overall and per source.

        "Recent" means collected within the last 24 hours.
        """
        now = now or datetime.now(UTC)
        cutoff = now - STATS_WINDOW
        recent = case((Item.collected_at > cutoff, 1), else_=0)

        totals = await self.session.execute(
            select(func.count(Item.id), func.coalesce(func.sum(recent), 0))
        )
        total_items, items_last_24h = totals.one()

        per_source = await self.session.execute(
            select(
                Source.name,
                Source.type,
                func.count(Item.id),
                func.coalesce(func.sum(recent), 0),
            )
            .outerjoin(Item, Item.source_id == Source.id)
            .group_by(Source.id, Source.name, Source.type, Source.created_at)
            .order_by(Source.created_at, Source.name)
        )

        return FeedStats(
            total_items=int(total_items),
            items_last_24h=int(items_last_24h),
            sources=[
                SourceStats(name=name, type=type_, count=int(count), recent_count=int(recent_count))
                for name, type_, count, recent_count in per_source.all()
            ],
        )


__all__ = ["FeedQueryService", "velocity"]
