"""HTTP Client for shared connection management.

This module provides a managed httpx.AsyncClient that every collector
reuses for upstream calls.
"""

from typing import Any

import httpx

from hotnews.core.logging import get_logger

logger = get_logger(__name__)


class HTTPClient:
    """Managed HTTP client with connection reuse.

    Designed for DI injection. Create once per process (or per Celery task
    run), inject into collectors, close at shutdown.

    Example:
        >>> http_client = HTTPClient(timeout=10.0)
        >>> response = await http_client.get("https://hacker-news.firebaseio.com/v0/topstories.json")
        >>> await http_client.close()
    """

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = "hot-news-agent",
        max_connections: int = 20,
        max_keepalive_connections: int = 10,
    ) -> None:
        """Initialize HTTP client.

        Args:
            timeout: Request timeout in seconds (applies to every call)
            user_agent: User-Agent header sent upstream
            max_connections: Maximum number of connections
            max_keepalive_connections: Maximum keepalive connections
        """
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max_keepalive_connections,
            ),
            headers={"User-Agent": user_agent},
            follow_redirects=True,
        )
        logger.debug(
            "HTTP client initialized",
            timeout=timeout,
            max_connections=max_connections,
        )

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send GET request."""
        return await self._client.get(url, **kwargs)

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()
        logger.debug("HTTP client closed")


__all__ = ["HTTPClient"]
