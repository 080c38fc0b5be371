"""Source collector configuration models.

Defines default settings and configuration for each collector.
"""

from typing import Literal

from pydantic import BaseModel, Field


class HackerNewsConfig(BaseModel):
    """Hacker News collector configuration.

    Attributes:
        name: Source display name
        base_importance: Source weight for scoring (1-10)
        poll_interval_minutes: Advertised polling cadence
        top_limit: Story ids taken from the top stories list
        new_limit: Story ids taken from the new stories list
        max_stories: Cap on the merged id list
        batch_size: Story details fetched concurrently
        batch_delay: Pause between batches in seconds
    """

    name: str = Field(default="Hacker News")
    base_importance: int = Field(default=7, ge=1, le=10)
    poll_interval_minutes: int = Field(default=10, ge=1)
    top_limit: int = Field(default=100, ge=0, le=500)
    new_limit: int = Field(default=50, ge=0, le=500)
    max_stories: int = Field(default=150, ge=1, le=500)
    batch_size: int = Field(default=20, ge=1, le=100)
    batch_delay: float = Field(default=0.1, ge=0.0, le=10.0)


class RSSFeed(BaseModel):
    """A single RSS/Atom feed.

    Attributes:
        name: Display name for the source
        url: Feed URL (also the source key suffix)
        category: Editorial category of the publisher
        base_importance: Source weight for scoring (1-10)
    """

    name: str
    url: str
    category: Literal["ai_specific", "tech_publication", "newsletter"] = "tech_publication"
    base_importance: int = Field(default=6, ge=1, le=10)


DEFAULT_FEEDS: list[RSSFeed] = [
    RSSFeed(
        name="OpenAI Blog",
        url="https://openai.com/blog/rss.xml",
        category="ai_specific",
        base_importance=9,
    ),
    RSSFeed(
        name="Anthropic News",
        url="https://www.anthropic.com/rss.xml",
        category="ai_specific",
        base_importance=9,
    ),
    RSSFeed(
        name="Google AI Blog",
        url="https://blog.google/technology/ai/rss/",
        category="ai_specific",
        base_importance=8,
    ),
    RSSFeed(
        name="Hugging Face",
        url="https://huggingface.co/blog/feed.xml",
        category="ai_specific",
        base_importance=7,
    ),
    RSSFeed(
        name="TechCrunch AI",
        url="https://techcrunch.com/category/artificial-intelligence/feed/",
        category="tech_publication",
        base_importance=6,
    ),
    RSSFeed(
        name="The Verge AI",
        url="https://www.theverge.com/rss/ai-artificial-intelligence/index.xml",
        category="tech_publication",
        base_importance=6,
    ),
    RSSFeed(
        name="MIT Tech Review",
        url="https://www.technologyreview.com/feed/",
        category="tech_publication",
        base_importance=8,
    ),
    RSSFeed(
        name="Ars Technica",
        url="https://feeds.arstechnica.com/arstechnica/technology-lab",
        category="tech_publication",
        base_importance=6,
    ),
    RSSFeed(
        name="The Batch",
        url="https://www.deeplearning.ai/the-batch/feed/",
        category="newsletter",
        base_importance=7,
    ),
    RSSFeed(
        name="Simon Willison",
        url="https://simonwillison.net/atom/everything/",
        category="newsletter",
        base_importance=7,
    ),
]


class RSSConfig(BaseModel):
    """RSS/Atom collector configuration.

    Attributes:
        feeds: Feeds to poll
        poll_interval_minutes: Advertised polling cadence
        entries_per_feed: Maximum entries taken from each feed
        feed_delay: Pause between feeds in seconds
        parser: "rss2json" uses the conversion API, "feedparser" downloads
            and parses the feed locally
        converter_url: rss2json endpoint
    """

    feeds: list[RSSFeed] = Field(default_factory=lambda: [f.model_copy() for f in DEFAULT_FEEDS])
    poll_interval_minutes: int = Field(default=30, ge=1)
    entries_per_feed: int = Field(default=10, ge=1, le=100)
    feed_delay: float = Field(default=0.2, ge=0.0, le=10.0)
    parser: Literal["rss2json", "feedparser"] = "rss2json"
    converter_url: str = Field(default="https://api.rss2json.com/v1/api.json")


DEFAULT_TRACKED_REPOS: list[str] = [
    "openai/openai-python",
    "anthropics/anthropic-sdk-python",
    "huggingface/transformers",
    "langchain-ai/langchain",
    "run-llama/llama_index",
    "vllm-project/vllm",
    "ollama/ollama",
    "ggerganov/llama.cpp",
    "microsoft/autogen",
    "crewAIInc/crewAI",
    "lm-sys/FastChat",
    "guidance-ai/guidance",
]


class GitHubConfig(BaseModel):
    """GitHub releases and trending collector configuration.

    Attributes:
        name: Source display name
        base_importance: Source weight (1-10)
        poll_interval_minutes: Advertised polling cadence
        tracked_repos: "owner/name" repositories whose latest release is collected
        topics: Topics searched for trending repositories
        topics_per_run: How many of the topics are searched each run
        lookback_days: Only repositories created within this window trend
        min_stars: Minimum stars for a trending repository
        search_per_page: Search page size
        results_per_topic: Search results kept per topic
        release_delay: Pause between release calls in seconds
        topic_delay: Pause between search calls in seconds
        star_delta_threshold: Star change needed to refresh a stored repository
        token: Optional API token for higher rate limits
    """

    name: str = Field(default="GitHub")
    base_importance: int = Field(default=8, ge=1, le=10)
    poll_interval_minutes: int = Field(default=60, ge=1)
    tracked_repos: list[str] = Field(default_factory=lambda: list(DEFAULT_TRACKED_REPOS))
    topics: list[str] = Field(
        default_factory=lambda: ["llm", "machine-learning", "langchain", "transformers"]
    )
    topics_per_run: int = Field(default=2, ge=0)
    lookback_days: int = Field(default=7, ge=1, le=365)
    min_stars: int = Field(default=50, ge=0)
    search_per_page: int = Field(default=5, ge=1, le=100)
    results_per_topic: int = Field(default=3, ge=1, le=100)
    release_delay: float = Field(default=0.1, ge=0.0, le=10.0)
    topic_delay: float = Field(default=0.5, ge=0.0, le=10.0)
    star_delta_threshold: int = Field(default=10, ge=0)
    token: str | None = Field(default=None)


class RetentionConfig(BaseModel):
    """Retention sweep configuration.

    Attributes:
        max_age_days: Items published before now minus this many days are deleted
        batch_size: Maximum deletions per sweep
    """

    max_age_days: int = Field(default=30, ge=1)
    batch_size: int = Field(default=500, ge=1, le=10000)


__all__ = [
    "DEFAULT_FEEDS",
    "DEFAULT_TRACKED_REPOS",
    "GitHubConfig",
    "HackerNewsConfig",
    "RSSConfig",
    "RSSFeed",
    "RetentionConfig",
]
