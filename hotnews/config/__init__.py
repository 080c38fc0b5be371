"""Collector configuration models."""

from hotnews.config.sources import (
    DEFAULT_FEEDS,
    DEFAULT_TRACKED_REPOS,
    GitHubConfig,
    HackerNewsConfig,
    RetentionConfig,
    RSSConfig,
    RSSFeed,
)

__all__ = [
    "DEFAULT_FEEDS",
    "DEFAULT_TRACKED_REPOS",
    "GitHubConfig",
    "HackerNewsConfig",
    "RSSConfig",
    "RSSFeed",
    "RetentionConfig",
]
