"""Item ORM model.

This module defines the Item model for collected, scored news items.
"""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotnews.core.types import UTCDateTime
from hotnews.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from hotnews.models.source import Source


class ItemKind(str, enum.Enum):
    """What an item represents upstream."""

    ARTICLE = "article"  # Feed entry
    DISCUSSION = "discussion"  # Discussion-site story
    REPO = "repo"  # Code-host release or trending repository


class Item(Base, UUIDMixin, TimestampMixin):
    """Collected news item.

    Attributes:
        source_id: Foreign key to sources table
        external_id: Upstream identifier, unique per source
        kind: Item kind
        title: Title as published upstream
        url: Link to the item
        author: Author or owner (if known)
        published_at: When the item was published upstream
        collected_at: When the item was first stored
        score: Upstream engagement (points, stars)
        comments_count: Upstream comment count (forks for repositories)
        comments_url: Discussion link
        importance_score: Heuristic importance (0-100)
        content_hash: Hash of normalized title and URL
        canonical_item_id: Earlier item with the same content hash, if any
        tags: Ordered tag labels
        source: Owning source
    """

    __tablename__ = "items"

    # Foreign Keys
    source_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("sources.id", ondelete="CASCADE"), nullable=False, index=True
    )
    external_id: Mapped[str] = mapped_column(String(500), nullable=False)
    kind: Mapped[ItemKind] = mapped_column(Enum(ItemKind), nullable=False)

    # Content
    title: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str | None] = mapped_column(String(200))

    # Timestamps
    published_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)
    collected_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)

    # Engagement
    score: Mapped[int | None] = mapped_column(Integer)
    comments_count: Mapped[int | None] = mapped_column(Integer)
    comments_url: Mapped[str | None] = mapped_column(Text)

    # Scoring
    importance_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    # Deduplication (no FK: deleting a canonical never promotes its duplicates)
    content_hash: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    canonical_item_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)

    # Classification
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Relationships
    source: Mapped["Source"] = relationship("Source", back_populates="items")

    __table_args__ = (UniqueConstraint("source_id", "external_id"),)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Item(id={self.id}, title={self.title[:50]}, importance={self.importance_score})>"


__all__ = [
    "Item",
    "ItemKind",
]
