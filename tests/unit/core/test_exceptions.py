"""Tests for hotnews.core.exceptions module."""

import pytest

from hotnews.core.exceptions import (
    CollectionError,
    ConfigError,
    ConfigValidationError,
    DatabaseError,
    ExternalAPIError,
    HotNewsError,
    RateLimitError,
    ServiceError,
)


@pytest.mark.unit
def test_hotnews_error_context():
    error = HotNewsError("Something failed", context={"source": "rss"})
    error.with_context(feed="OpenAI Blog")

    assert str(error) == "Something failed"
    assert error.to_dict() == {
        "error_type": "HotNewsError",
        "message": "Something failed",
        "context": {"source": "rss", "feed": "OpenAI Blog"},
    }


@pytest.mark.unit
def test_database_error_operation():
    error = DatabaseError("insert failed", operation="insert")
    assert error.context["operation"] == "insert"
    assert isinstance(error, HotNewsError)


@pytest.mark.unit
def test_config_validation_error_message():
    error = ConfigValidationError(field="source_type", value="reddit", reason="Unknown source type")

    assert "source_type" in str(error)
    assert error.context["value"] == "reddit"
    assert isinstance(error, ConfigError)


@pytest.mark.unit
def test_external_api_error():
    error = ExternalAPIError(
        service="rss2json",
        message="Feed not found",
        status_code=200,
        endpoint="https://example.com/feed.xml",
        response_body="x" * 1000,
    )

    assert str(error) == "rss2json API error: Feed not found"
    assert error.context["service"] == "rss2json"
    assert len(error.context["response_body"]) == 500
    assert isinstance(error, ServiceError)


@pytest.mark.unit
def test_rate_limit_error():
    error = RateLimitError("github", retry_after=120, endpoint="/search/repositories")

    assert error.retry_after == 120
    assert error.status_code == 403
    assert "retry after 120s" in str(error)
    assert isinstance(error, ExternalAPIError)


@pytest.mark.unit
def test_collection_error():
    error = CollectionError("Collector failed: boom", source_type="hackernews")

    assert error.source_type == "hackernews"
    assert error.context["source_type"] == "hackernews"
    assert isinstance(error, ServiceError)
