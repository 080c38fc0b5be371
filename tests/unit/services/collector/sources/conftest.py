"""Shared fixtures for source collector tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from hotnews.infrastructure.http_client import HTTPClient


@pytest.fixture
def mock_http_client() -> HTTPClient:
    """Create a mock HTTP client."""
    client = MagicMock(spec=HTTPClient)
    client.get = AsyncMock()
    return client
