"""Source ORM model.

A Source is one upstream origin of items: the Hacker News front page, a
single RSS/Atom feed, or the GitHub releases/trending collector.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotnews.core.types import UTCDateTime
from hotnews.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from hotnews.models.item import Item


class SourceType(str, enum.Enum):
    """Source collection method type."""

    HACKERNEWS = "hackernews"  # Discussion site
    RSS = "rss"  # RSS/Atom feeds
    GITHUB = "github"  # Code host releases and trending repos


class Source(Base, UUIDMixin, TimestampMixin):
    """Item collection source.

    Created on first use by a collector and never deleted by normal
    operation; afterwards only last_polled_at changes.

    Attributes:
        key: Unique source key ("hackernews", "github" or "rss:<feed url>")
        name: Display name (e.g., "Hacker News", "OpenAI Blog")
        type: Collection method type
        config: Collector settings (url, category, poll_interval_minutes)
        base_importance: Source weight used by the importance scorer (1-10)
        is_active: Whether source is active
        last_polled_at: When a collector last touched this source
        items: Collected items (1:N)
    """

    __tablename__ = "sources"

    # Basic Info
    key: Mapped[str] = mapped_column(String(500), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[SourceType] = mapped_column(Enum(SourceType), nullable=False, index=True)

    # Configuration
    config: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    base_importance: Mapped[int] = mapped_column(Integer, nullable=False, default=5)

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_polled_at: Mapped[datetime | None] = mapped_column(UTCDateTime())

    # Relationships
    items: Mapped[list["Item"]] = relationship(
        "Item", back_populates="source", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Source(id={self.id}, key={self.key}, type={self.type})>"


__all__ = [
    "Source",
    "SourceType",
]
