"""Unit tests for the source factory."""

import pytest

from hotnews.config.sources import GitHubConfig, HackerNewsConfig, RSSConfig
from hotnews.core.exceptions import ConfigValidationError
from hotnews.infrastructure.http_client import HTTPClient
from hotnews.models.source import SourceType
from hotnews.services.collector.sources import GitHubSource, HackerNewsSource, RSSSource
from hotnews.services.collector.sources.factory import (
    SOURCE_CLASSES,
    create_source,
    get_source_class,
)


@pytest.mark.unit
def test_every_source_type_has_a_collector():
    assert set(SOURCE_CLASSES) == set(SourceType)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("source_type", "expected"),
    [
        ("hackernews", HackerNewsSource),
        (SourceType.RSS, RSSSource),
        ("github", GitHubSource),
        ("reddit", None),
    ],
)
def test_get_source_class(source_type, expected):
    assert get_source_class(source_type) is expected


@pytest.mark.unit
def test_create_source_with_default_config(mock_http_client: HTTPClient):
    source = create_source("hackernews", http_client=mock_http_client)

    assert isinstance(source, HackerNewsSource)
    assert isinstance(source.config, HackerNewsConfig)


@pytest.mark.unit
def test_create_source_with_config(mock_http_client: HTTPClient):
    config = RSSConfig(entries_per_feed=3)

    source = create_source(SourceType.RSS, http_client=mock_http_client, config=config)

    assert source.config is config


@pytest.mark.unit
def test_create_source_unknown_type(mock_http_client: HTTPClient):
    with pytest.raises(ConfigValidationError, match="source_type"):
        create_source("reddit", http_client=mock_http_client)


@pytest.mark.unit
def test_create_source_wrong_config(mock_http_client: HTTPClient):
    with pytest.raises(ConfigValidationError, match="config"):
        create_source("github", http_client=mock_http_client, config=HackerNewsConfig())

    assert isinstance(
        create_source("github", http_client=mock_http_client, config=GitHubConfig()),
        GitHubSource,
    )
