"""Source factory for collector instantiation.

Maps source types to collector classes so workers can build a collector
from its type alone.
"""

from typing import Any

from pydantic import BaseModel

from hotnews.core.exceptions import ConfigValidationError
from hotnews.core.logging import get_logger
from hotnews.infrastructure.http_client import HTTPClient
from hotnews.models.source import SourceType
from hotnews.services.collector.base import BaseSource
from hotnews.services.collector.sources.github import GitHubSource
from hotnews.services.collector.sources.hackernews import HackerNewsSource
from hotnews.services.collector.sources.rss import RSSSource

logger = get_logger(__name__)

# Source type to class mapping
SOURCE_CLASSES: dict[SourceType, type[BaseSource[Any]]] = {
    SourceType.HACKERNEWS: HackerNewsSource,
    SourceType.RSS: RSSSource,
    SourceType.GITHUB: GitHubSource,
}


def get_source_class(source_type: SourceType | str) -> type[BaseSource[Any]] | None:
    """Get the collector class for a source type.

    Args:
        source_type: Source type or its string value (e.g., "hackernews")

    Returns:
        Collector class or None if the type is unknown
    """
    try:
        return SOURCE_CLASSES.get(SourceType(source_type))
    except ValueError:
        return None


def create_source(
    source_type: SourceType | str,
    http_client: HTTPClient,
    config: BaseModel | None = None,
) -> BaseSource[Any]:
    """Create a collector instance.

    Args:
        source_type: Source type (e.g., "hackernews", "rss", "github")
        http_client: Shared HTTP client for connection reuse
        config: Collector config (defaults to the class's default config)

    Returns:
        Collector instance

    Raises:
        ConfigValidationError: If the source type is unknown or the config
            has the wrong type
    """
    source_class = get_source_class(source_type)
    if source_class is None:
        raise ConfigValidationError(
            field="source_type",
            value=source_type,
            reason=f"Unknown source type (expected one of {[t.value for t in SourceType]})",
        )

    config = config or source_class.config_class()
    if not isinstance(config, source_class.config_class):
        raise ConfigValidationError(
            field="config",
            value=type(config).__name__,
            reason=f"{source_class.__name__} requires {source_class.config_class.__name__}",
        )

    logger.debug("Creating collector", source_type=str(source_type))
    return source_class(config=config, http_client=http_client)


__all__ = [
    "SOURCE_CLASSES",
    "create_source",
    "get_source_class",
]
