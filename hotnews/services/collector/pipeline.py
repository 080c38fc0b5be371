"""Item collection pipeline service.

This module provides the idempotent collection protocol shared by every
collector. Used by the Celery workers.

The pipeline:
1. Collect raw items from the collector (fetch, relevance filter, DTO conversion)
2. Resolve (get-or-create) the Source of each item
3. Re-sighting: let the collector refresh the stored item
4. New item: hash, link to canonical, score, tag, insert
5. Mark every touched Source as polled

Running the same collection twice stores nothing new the second time.

Usage:
    pipeline = CollectionPipeline(session)
    result = await pipeline.run(HackerNewsSource(config, http_client))
    await session.commit()
"""

import time
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hotnews.core.exceptions import CollectionError, DatabaseError
from hotnews.core.logging import collection_context, get_logger
from hotnews.models.item import Item
from hotnews.models.source import Source
from hotnews.services.collector.base import BaseSource, CollectionResult, RawItem
from hotnews.services.collector.deduplicator import ItemDeduplicator
from hotnews.services.collector.repository import ItemRepository, SourceRepository

logger = get_logger(__name__)


class CollectionPipeline:
    """Runs a collector and upserts its items.

    Attributes:
        session: Database session (committed by the caller)
        sources: Source repository
        items: Item repository
        deduplicator: Canonical hash lookup
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize pipeline.

        Args:
            session: Database session
            clock: Returns the current UTC time (injectable for tests)
        """
        self.session = session
        self.sources = SourceRepository(session)
        self.items = ItemRepository(session)
        self.deduplicator = ItemDeduplicator(self.items)
        self._clock = clock or (lambda: datetime.now(UTC))

    async def run(self, collector: BaseSource[Any]) -> CollectionResult:
        """Collect from a collector and store the results.

        Args:
            collector: Collector to run

        Returns:
            CollectionResult with per-outcome counts

        Raises:
            CollectionError: If the collector fails unexpectedly
            DatabaseError: If storage is unavailable
        """
        with collection_context(collector.source_type.value):
            return await self._run(collector)

    async def _run(self, collector: BaseSource[Any]) -> CollectionResult:
        started = time.monotonic()
        source_type = collector.source_type
        result = CollectionResult(source_type=source_type)

        logger.info("Collection started", source_type=source_type.value)

        try:
            raw_items = await collector.collect()
        except Exception as e:
            logger.error(
                "Collector failed", source_type=source_type.value, error=str(e), exc_info=True
            )
            raise CollectionError(
                f"Collector failed: {e}", source_type=source_type.value
            ) from e

        result.collected_count = len(raw_items)
        touched: dict[str, Source] = {}

        try:
            for raw in raw_items:
                source = touched.get(raw.source.key)
                if source is None:
                    source = await self.sources.get_or_create(raw.source)
                    touched[raw.source.key] = source
                await self._upsert(collector, source, raw, result)

            now = self._clock()
            for source in touched.values():
                await self.sources.touch(source, now)
        except SQLAlchemyError as e:
            logger.error(
                "Collection storage failed",
                source_type=source_type.value,
                error=str(e),
                exc_info=True,
            )
            raise DatabaseError(
                f"Failed to store collected items: {e}",
                context={"source_type": source_type.value},
                operation="upsert",
            ) from e

        result.duration_seconds = round(time.monotonic() - started, 3)
        logger.info(
            "Collection complete",
            source_type=source_type.value,
            collected=result.collected_count,
            inserted=result.inserted_count,
            updated=result.updated_count,
            unchanged=result.unchanged_count,
            duplicates=result.duplicate_count,
            duration=result.duration_seconds,
        )
        return result

    async def _upsert(
        self,
        collector: BaseSource[Any],
        source: Source,
        raw: RawItem,
        result: CollectionResult,
    ) -> None:
        """Insert a new item or apply a re-sighting to the stored one."""
        existing = await self.items.get_by_external_id(source.id, raw.external_id)
        if existing is not None:
            self._resight(collector, source, existing, raw, result)
            return

        now = self._clock()
        content_hash = collector.content_hash(raw)
        dedup = await self.deduplicator.check(content_hash)

        item = Item(
            id=uuid.uuid4(),
            source_id=source.id,
            external_id=raw.external_id,
            kind=raw.kind,
            title=raw.title,
            url=raw.url,
            author=raw.author,
            published_at=raw.published_at,
            collected_at=now,
            score=raw.score,
            comments_count=raw.comments_count,
            comments_url=raw.comments_url,
            importance_score=collector.score(raw, source.base_importance, now),
            content_hash=content_hash,
            canonical_item_id=dedup.canonical_item_id,
            tags=collector.tags(raw),
        )

        if await self.items.add(item):
            result.inserted_count += 1
            if dedup.is_duplicate:
                result.duplicate_count += 1
            return

        # Lost an insert race: the winner's row is now the stored item
        stored = await self.items.get_by_external_id(source.id, raw.external_id)
        if stored is None:
            result.errors.append(f"{raw.external_id}: insert conflicted without a stored row")
            return
        self._resight(collector, source, stored, raw, result)

    def _resight(
        self,
        collector: BaseSource[Any],
        source: Source,
        item: Item,
        raw: RawItem,
        result: CollectionResult,
    ) -> None:
        if collector.refresh(item, raw, source.base_importance, self._clock()):
            result.updated_count += 1
        else:
            result.unchanged_count += 1


__all__ = ["CollectionPipeline"]
