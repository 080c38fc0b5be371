"""Base interfaces and DTOs for item collection.

This module defines the core data structures and abstract interfaces
used throughout the collection pipeline.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, Field

from hotnews.infrastructure.http_client import HTTPClient
from hotnews.models.item import Item, ItemKind
from hotnews.models.source import SourceType
from hotnews.services.collector.classifier import detect_tags
from hotnews.services.collector.normalizer import content_hash

ConfigT = TypeVar("ConfigT", bound=BaseModel)


class SourceSpec(BaseModel):
    """Identity and settings of the Source row an item belongs to.

    Attributes:
        key: Unique source key ("hackernews", "github", "rss:<url>")
        name: Display name
        type: Source type
        base_importance: Source weight for scoring (1-10)
        config: Collector settings persisted on the Source row
    """

    key: str
    name: str
    type: SourceType
    base_importance: int = Field(ge=1, le=10)
    config: dict[str, Any] = Field(default_factory=dict)


class RawItem(BaseModel):
    """Raw item data from an external source.

    This is the DTO produced by collectors before hashing, scoring and
    storage. Malformed upstream records never become RawItems.

    Attributes:
        source: Source the item belongs to
        external_id: Upstream identifier, unique within the source
        kind: Item kind
        title: Title as published
        url: Item link
        author: Author or owner
        body: Optional text used for relevance checks
        published_at: Upstream publication time (UTC)
        score: Points or stars
        comments_count: Comments or forks
        comments_url: Discussion link
        tags: Pre-computed tags (None means derive from the title)
        hash_key: Pre-computed content hash (None means hash title and URL)
        entities: Major entities mentioned in the title
    """

    source: SourceSpec
    external_id: str = Field(min_length=1)
    kind: ItemKind
    title: str = Field(min_length=1)
    url: str = Field(min_length=1)
    author: str | None = None
    body: str | None = None
    published_at: datetime
    score: int | None = None
    comments_count: int | None = None
    comments_url: str | None = None
    tags: list[str] | None = None
    hash_key: str | None = None
    entities: list[str] = Field(default_factory=list)


class BaseSource(ABC, Generic[ConfigT]):
    """Abstract base class for all source collectors.

    Each collector implements collect() and score(). Collectors whose
    stored items change on re-sighting also override refresh(); the
    default treats stored items as immutable.

    Attributes:
        source_type: Type of the Source rows this collector writes
    """

    source_type: ClassVar[SourceType]
    config_class: ClassVar[type[BaseModel]]

    def __init__(self, config: ConfigT, http_client: HTTPClient) -> None:
        """Initialize source collector.

        Args:
            config: Typed configuration object
            http_client: Shared HTTP client
        """
        self._config = config
        self._http_client = http_client

    @property
    def config(self) -> ConfigT:
        return self._config

    @abstractmethod
    async def collect(self) -> list[RawItem]:
        """Fetch upstream data and convert it to RawItems.

        Upstream failures are logged and yield fewer (or no) items; they
        never raise.

        Returns:
            Items ready for storage
        """

    @abstractmethod
    def score(self, raw: RawItem, base_importance: int, now: datetime) -> int:
        """Importance score (0-100) for a newly sighted item."""

    def refresh(self, item: Item, raw: RawItem, base_importance: int, now: datetime) -> bool:
        """Apply a re-sighting to a stored item.

        Args:
            item: Stored item
            raw: Fresh upstream data
            base_importance: Source weight
            now: Reference time

        Returns:
            True if the stored item changed
        """
        return False

    def tags(self, raw: RawItem) -> list[str]:
        """Tags stored on a new item."""
        return list(raw.tags) if raw.tags else detect_tags(raw.title)

    def content_hash(self, raw: RawItem) -> str:
        """Content hash stored on a new item."""
        return raw.hash_key or content_hash(raw.title, raw.url)


class CollectionResult(BaseModel):
    """Result of a collection run.

    Attributes:
        source_type: Collector that ran
        collected_count: Raw items returned by the collector
        inserted_count: New items stored
        updated_count: Stored items refreshed
        unchanged_count: Stored items seen again without changes
        duplicate_count: New items linked to an earlier canonical item
        errors: Error messages for items that could not be stored
        duration_seconds: Time taken for the run
    """

    source_type: SourceType
    collected_count: int = 0
    inserted_count: int = 0
    updated_count: int = 0
    unchanged_count: int = 0
    duplicate_count: int = 0
    errors: list[str] = Field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def processed_count(self) -> int:
        """Items that reached storage (inserted, refreshed or unchanged)."""
        return self.inserted_count + self.updated_count + self.unchanged_count


__all__ = [
    "BaseSource",
    "CollectionResult",
    "RawItem",
    "SourceSpec",
]
