"""Infrastructure layer components (shared external API clients)."""

from hotnews.infrastructure.http_client import HTTPClient

__all__ = ["HTTPClient"]
