"""Item deduplication service.

Hash-based linkage across sources: a new item whose content hash matches
an already stored item points at it through canonical_item_id.

Design Decision (Link, don't drop):
- Duplicates are stored, so each source keeps its own record and engagement
- Ranked feeds hide every item with a canonical link
- The link is set only at insert time and never changes afterwards
"""

import uuid

from pydantic import BaseModel

from hotnews.core.logging import get_logger
from hotnews.services.collector.repository import ItemRepository

logger = get_logger(__name__)


class DedupResult(BaseModel):
    """Result of duplicate detection.

    Attributes:
        content_hash: Hash that was looked up
        canonical_item_id: Earlier item with the same hash, if any
    """

    content_hash: str
    canonical_item_id: uuid.UUID | None = None

    @property
    def is_duplicate(self) -> bool:
        return self.canonical_item_id is not None


class ItemDeduplicator:
    """Finds the canonical item for a content hash.

    Attributes:
        items: Item repository used for hash lookups
    """

    def __init__(self, items: ItemRepository) -> None:
        self.items = items

    async def check(self, content_hash: str) -> DedupResult:
        """Look up the canonical item for a new item's hash.

        Args:
            content_hash: Content hash of the new item

        Returns:
            DedupResult (canonical_item_id is None for first sightings)
        """
        canonical = await self.items.find_by_content_hash(content_hash)
        if canonical is None:
            return DedupResult(content_hash=content_hash)

        logger.debug(
            "Duplicate detected",
            content_hash=content_hash,
            canonical_item_id=str(canonical.id),
        )
        return DedupResult(content_hash=content_hash, canonical_item_id=canonical.id)


__all__ = ["DedupResult", "ItemDeduplicator"]
