"""News query API.

Ranked reads over stored items, cached in-process for a few minutes.
Every endpoint accepts refresh=true to drop the cache before answering.
"""

import uuid
from collections.abc import Awaitable, Callable, Hashable
from typing import TypeVar

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hotnews.api.errors import ErrorResponse, build_http_error
from hotnews.core.cache import TTLCache
from hotnews.core.container import get_db_session, get_query_cache
from hotnews.services.feed.queries import FeedQueryService
from hotnews.services.feed.schemas import FeedItem, FeedPage, FeedStats

router = APIRouter(prefix="/api/news", tags=["news"])

T = TypeVar("T")

UNAVAILABLE = {503: {"model": ErrorResponse, "description": "Storage unavailable"}}


def get_feed_service(session: AsyncSession = Depends(get_db_session)) -> FeedQueryService:
    return FeedQueryService(session)


async def _cached(
    cache: TTLCache,
    key: Hashable,
    refresh: bool,
    loader: Callable[[], Awaitable[T]],
) -> T:
    if refresh:
        cache.invalidate()
    return await cache.get_or_set(key, loader)


@router.get("/feed", response_model=FeedPage, responses=UNAVAILABLE)
async def get_feed(
    limit: int = Query(default=30, ge=1, le=200),
    min_score: int = Query(default=0, ge=0, le=100),
    refresh: bool = False,
    service: FeedQueryService = Depends(get_feed_service),
    cache: TTLCache = Depends(get_query_cache),
) -> FeedPage:
    """Top items by importance."""
    return await _cached(
        cache,
        ("feed", limit, min_score),
        refresh,
        lambda: service.get_feed(limit=limit, min_score=min_score),
    )


@router.get("/recent", response_model=list[FeedItem], responses=UNAVAILABLE)
async def get_recent(
    limit: int = Query(default=50, ge=1, le=200),
    hours_ago: int = Query(default=24, ge=1, le=24 * 30),
    refresh: bool = False,
    service: FeedQueryService = Depends(get_feed_service),
    cache: TTLCache = Depends(get_query_cache),
) -> list[FeedItem]:
    """Recently published items, newest first."""
    return await _cached(
        cache,
        ("recent", limit, hours_ago),
        refresh,
        lambda: service.get_recent(limit=limit, hours_ago=hours_ago),
    )


@router.get("/trending", response_model=list[FeedItem], responses=UNAVAILABLE)
async def get_trending(
    limit: int = Query(default=10, ge=1, le=100),
    refresh: bool = False,
    service: FeedQueryService = Depends(get_feed_service),
    cache: TTLCache = Depends(get_query_cache),
) -> list[FeedItem]:
    """Items with the highest engagement velocity over the last 6 hours."""
    return await _cached(
        cache,
        ("trending", limit),
        refresh,
        lambda: service.get_trending(limit=limit),
    )


@router.get("/source/{source_type}", response_model=list[FeedItem], responses=UNAVAILABLE)
async def get_by_source(
    source_type: str,
    limit: int = Query(default=20, ge=1, le=200),
    refresh: bool = False,
    service: FeedQueryService = Depends(get_feed_service),
    cache: TTLCache = Depends(get_query_cache),
) -> list[FeedItem]:
    """Top items from one source type; unknown types return []."""
    return await _cached(
        cache,
        ("source", source_type, limit),
        refresh,
        lambda: service.get_by_source(source_type, limit=limit),
    )


@router.get(
    "/items/{item_id}",
    response_model=FeedItem,
    responses={404: {"model": ErrorResponse, "description": "Item not found"}, **UNAVAILABLE},
)
async def get_item(
    item_id: str,
    refresh: bool = False,
    service: FeedQueryService = Depends(get_feed_service),
    cache: TTLCache = Depends(get_query_cache),
) -> FeedItem:
    """A single item by id."""
    try:
        parsed = uuid.UUID(item_id)
    except ValueError as e:
        raise build_http_error(404, "not_found", "Item not found") from e

    item = await _cached(cache, ("item", parsed), refresh, lambda: service.get_by_id(parsed))
    if item is None:
        raise build_http_error(404, "not_found", "Item not found")
    return item


@router.get("/stats", response_model=FeedStats, responses=UNAVAILABLE)
async def get_stats(
    refresh: bool = False,
    service: FeedQueryService = Depends(get_feed_service),
    cache: TTLCache = Depends(get_query_cache),
) -> FeedStats:
    """Item counts overall and per source."""
    return await _cached(cache, ("stats",), refresh, service.get_stats)


__all__ = ["router"]
