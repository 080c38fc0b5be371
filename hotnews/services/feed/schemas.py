"""Read models returned by the feed queries and the news API."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from hotnews.models.item import Item, ItemKind
from hotnews.models.source import SourceType


class SourceRef(BaseModel):
    """Source summary attached to every feed item."""

    name: str
    type: SourceType


class FeedItem(BaseModel):
    """A stored item as served to readers.

    Attributes:
        velocity: Engagement per hour (trending results only)
    """

    id: uuid.UUID
    external_id: str
    kind: ItemKind
    title: str
    url: str
    author: str | None = None
    published_at: datetime
    collected_at: datetime
    score: int | None = None
    comments_count: int | None = None
    comments_url: str | None = None
    importance_score: int = Field(ge=0, le=100)
    content_hash: str
    canonical_item_id: uuid.UUID | None = None
    tags: list[str] = Field(default_factory=list)
    source: SourceRef | None = None
    velocity: float | None = None

    @classmethod
    def from_item(cls, item: Item, velocity: float | None = None) -> "FeedItem":
        """Build from an Item whose source relationship is loaded."""
        source = item.source
        return cls(
            id=item.id,
            external_id=item.external_id,
            kind=item.kind,
            title=item.title,
            url=item.url,
            author=item.author,
            published_at=item.published_at,
            collected_at=item.collected_at,
            score=item.score,
            comments_count=item.comments_count,
            comments_url=item.comments_url,
            importance_score=item.importance_score,
            content_hash=item.content_hash,
            canonical_item_id=item.canonical_item_id,
            tags=list(item.tags or []),
            source=SourceRef(name=source.name, type=source.type) if source else None,
            velocity=velocity,
        )


class FeedPage(BaseModel):
    """One page of the ranked feed."""

    items: list[FeedItem]
    has_more: bool


class SourceStats(BaseModel):
    """Per-source item counts."""

    name: str
    type: SourceType
    count: int
    recent_count: int


class FeedStats(BaseModel):
    """Collection statistics.

    Attributes:
        total_items: All stored items, duplicates included
        items_last_24h: Items collected in the last 24 hours
        sources: Per-source counts
    """

    total_items: int
    items_last_24h: int
    sources: list[SourceStats]


__all__ = [
    "FeedItem",
    "FeedPage",
    "FeedStats",
    "SourceRef",
    "SourceStats",
]
