"""Feed query services."""

from hotnews.services.feed.queries import FeedQueryService
from hotnews.services.feed.schemas import FeedItem, FeedPage, FeedStats, SourceRef, SourceStats

__all__ = [
    "FeedItem",
    "FeedPage",
    "FeedQueryService",
    "FeedStats",
    "SourceRef",
    "SourceStats",
]
