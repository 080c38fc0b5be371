"""In-process query result cache.

A keyed cache with a fixed TTL and explicit invalidation, used by the query
API to avoid re-running ranking queries on every request.

The cache lives in process memory only: it does not survive restarts and is
not shared between API workers.
"""

import time
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, TypeVar

from hotnews.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class TTLCache:
    """Keyed cache whose entries expire after a fixed number of seconds.

    Example:
        >>> cache = TTLCache(ttl_seconds=300)
        >>> page = await cache.get_or_set(("feed", 30, 0), load_feed)
        >>> cache.invalidate()
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            ttl_seconds: Lifetime of each entry; 0 disables caching
            clock: Monotonic clock (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value or None when missing/expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        """Store a value under key."""
        if self.ttl_seconds <= 0:
            return
        self._entries[key] = (self._clock(), value)

    async def get_or_set(self, key: Hashable, loader: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value, loading and storing it on a miss.

        Args:
            key: Cache key
            loader: Coroutine factory producing the value

        Returns:
            Cached or freshly loaded value
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("Query cache hit", key=str(key))
            return cached  # type: ignore[no-any-return]

        value = await loader()
        self.set(key, value)
        return value

    def invalidate(self, key: Hashable | None = None) -> None:
        """Drop one entry, or every entry when key is None."""
        if key is None:
            self._entries.clear()
            logger.info("Query cache cleared")
        else:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["TTLCache"]
