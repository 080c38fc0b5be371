"""Shared fixtures for storage-backed service tests."""

import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from hotnews.models.item import Item, ItemKind
from hotnews.models.source import Source, SourceType

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return NOW


@pytest.fixture
def make_source(db_session: AsyncSession) -> Callable[..., Awaitable[Source]]:
    """Factory for persisted sources."""

    async def _make(
        key: str = "hackernews",
        name: str = "Hacker News",
        type: SourceType = SourceType.HACKERNEWS,
        base_importance: int = 7,
    ) -> Source:
        source = Source(
            key=key,
            name=name,
            type=type,
            config={},
            base_importance=base_importance,
            is_active=True,
        )
        db_session.add(source)
        await db_session.flush()
        return source

    return _make


@pytest.fixture
def make_item(db_session: AsyncSession) -> Callable[..., Awaitable[Item]]:
    """Factory for persisted items."""

    async def _make(source: Source, **overrides: Any) -> Item:
        values: dict[str, Any] = {
            "id": uuid.uuid4(),
            "source_id": source.id,
            "external_id": str(uuid.uuid4()),
            "kind": ItemKind.DISCUSSION,
            "title": "OpenAI releases a new model",
            "url": f"https://example.com/{uuid.uuid4().hex}",
            "published_at": NOW,
            "collected_at": NOW,
            "score": None,
            "comments_count": None,
            "importance_score": 50,
            "content_hash": uuid.uuid4().hex[:8],
            "tags": ["AI"],
        }
        values.update(overrides)
        item = Item(**values)
        db_session.add(item)
        await db_session.flush()
        return item

    return _make
