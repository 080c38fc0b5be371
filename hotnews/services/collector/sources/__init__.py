"""Source collectors.

- HackerNews: Hacker News Firebase API collector (discussion site)
- RSS: RSS/Atom feed collector (via rss2json or feedparser)
- GitHub: Releases and trending repositories (code host)
"""

from hotnews.services.collector.sources.github import GitHubSource
from hotnews.services.collector.sources.hackernews import HackerNewsSource
from hotnews.services.collector.sources.rss import RSSSource

__all__ = [
    "GitHubSource",
    "HackerNewsSource",
    "RSSSource",
]
