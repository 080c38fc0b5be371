"""Persistence for sources and items.

Thin repositories over an AsyncSession. They flush but never commit; the
caller owns the transaction.
"""

import uuid
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotnews.core.exceptions import DatabaseError
from hotnews.core.logging import get_logger
from hotnews.models.item import Item
from hotnews.models.source import Source
from hotnews.services.collector.base import SourceSpec

logger = get_logger(__name__)


class SourceRepository:
    """Source lookups and get-or-create by unique key."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, source_id: uuid.UUID) -> Source | None:
        return await self.session.get(Source, source_id)

    async def get_by_key(self, key: str) -> Source | None:
        result = await self.session.execute(select(Source).where(Source.key == key))
        return result.scalar_one_or_none()

    async def get_or_create(self, spec: SourceSpec) -> Source:
        """Return the source for spec.key, creating it on first use.

        A concurrent creator winning the unique-key race is handled by
        re-reading the row it inserted.

        Args:
            spec: Source identity and settings

        Returns:
            Existing or newly created Source

        Raises:
            DatabaseError: If the source can neither be inserted nor read
        """
        source = await self.get_by_key(spec.key)
        if source is not None:
            return source

        source = Source(
            key=spec.key,
            name=spec.name,
            type=spec.type,
            config=dict(spec.config),
            base_importance=spec.base_importance,
            is_active=True,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(source)
            logger.info("Source created", key=spec.key, type=spec.type.value)
            return source
        except IntegrityError:
            logger.debug("Source created concurrently, re-reading", key=spec.key)

        existing = await self.get_by_key(spec.key)
        if existing is None:
            raise DatabaseError(
                "Source insert conflicted but no row exists",
                context={"key": spec.key},
                operation="insert",
            )
        return existing

    async def touch(self, source: Source, now: datetime) -> None:
        """Record a poll of this source."""
        source.last_polled_at = now
        await self.session.flush()


class ItemRepository:
    """Item lookups, inserts and retention deletes."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, item_id: uuid.UUID) -> Item | None:
        return await self.session.get(Item, item_id)

    async def get_by_external_id(self, source_id: uuid.UUID, external_id: str) -> Item | None:
        result = await self.session.execute(
            select(Item).where(Item.source_id == source_id, Item.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def find_by_content_hash(self, content_hash: str) -> Item | None:
        """First stored item with this content hash (oldest collected first)."""
        result = await self.session.execute(
            select(Item)
            .where(Item.content_hash == content_hash)
            .order_by(Item.collected_at.asc(), Item.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def add(self, item: Item) -> bool:
        """Insert an item inside a savepoint.

        Returns:
            True if inserted, False if (source_id, external_id) already exists
        """
        try:
            async with self.session.begin_nested():
                self.session.add(item)
            return True
        except IntegrityError:
            logger.debug(
                "Item inserted concurrently",
                source_id=str(item.source_id),
                external_id=item.external_id,
            )
            return False

    async def delete(self, item: Item) -> None:
        await self.session.delete(item)
        await self.session.flush()

    async def delete_published_before(self, cutoff: datetime, limit: int) -> int:
        """Delete up to limit items published before cutoff, oldest first.

        Returns:
            Number of items deleted
        """
        result = await self.session.execute(
            select(Item.id)
            .where(Item.published_at < cutoff)
            .order_by(Item.published_at.asc(), Item.id.asc())
            .limit(limit)
        )
        ids = list(result.scalars())
        if not ids:
            return 0

        await self.session.execute(
            delete(Item).where(Item.id.in_(ids)).execution_options(synchronize_session=False)
        )
        return len(ids)


__all__ = ["ItemRepository", "SourceRepository"]
