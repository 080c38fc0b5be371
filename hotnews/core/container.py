"""Dependency Injection Container.

This module provides a centralized DI container using dependency-injector.
Lifecycles:
- Singleton: One instance per process (engine, HTTP client, query cache)
- Factory: New instance every time (sessions)

Usage:
    # In FastAPI
    from hotnews.core.container import get_db_session

    @router.get("/feed")
    async def feed(session: AsyncSession = Depends(get_db_session)):
        ...

    # In Celery
    async with TaskScope() as scope:
        async with scope.infrastructure.db_session() as session:
            ...

    # In tests
    with container.infrastructure.http_client.override(mock_http_client):
        ...
"""

from collections.abc import AsyncGenerator
from types import TracebackType

from dependency_injector import containers, providers
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hotnews.core.cache import TTLCache
from hotnews.core.config import Config, get_config
from hotnews.core.database import create_engine
from hotnews.core.logging import get_logger

logger = get_logger(__name__)


class InfrastructureContainer(containers.DeclarativeContainer):
    """Infrastructure layer dependencies (database, external clients)."""

    global_config = providers.Dependency(instance_of=Config)

    # ============================================
    # Database
    # ============================================

    db_engine = providers.Singleton(
        create_engine,
        config=global_config,
    )

    db_session_factory = providers.Singleton(
        async_sessionmaker,
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    # New session per request/task
    db_session = providers.Factory(
        lambda factory: factory(),
        factory=db_session_factory,
    )

    # ============================================
    # HTTP Client
    # ============================================

    http_client = providers.Singleton(
        "hotnews.infrastructure.http_client.HTTPClient",
        timeout=global_config.provided.http_timeout,
        user_agent=global_config.provided.user_agent,
    )


class ConfigContainer(containers.DeclarativeContainer):
    """Configuration models container.

    Provides typed Pydantic config models for collectors.
    """

    global_config = providers.Dependency(instance_of=Config)

    hackernews_config = providers.Singleton(
        "hotnews.config.sources.HackerNewsConfig",
    )

    rss_config = providers.Singleton(
        "hotnews.config.sources.RSSConfig",
    )

    github_config = providers.Singleton(
        "hotnews.config.sources.GitHubConfig",
        token=global_config.provided.github_token,
    )

    retention_config = providers.Singleton(
        "hotnews.config.sources.RetentionConfig",
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Root application container."""

    config = providers.Singleton(get_config)

    infrastructure = providers.Container(
        InfrastructureContainer,
        global_config=config,
    )

    configs = providers.Container(
        ConfigContainer,
        global_config=config,
    )

    # ============================================
    # Query layer
    # ============================================

    query_cache = providers.Singleton(
        TTLCache,
        ttl_seconds=config.provided.query_cache_ttl_seconds,
    )


def create_container() -> ApplicationContainer:
    """Create and configure the application container.

    Returns:
        Configured ApplicationContainer instance
    """
    return ApplicationContainer()


# Global container instance
container = create_container()


# ============================================
# FastAPI Integration
# ============================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database session.

    Yields a session and ensures cleanup.
    """
    session: AsyncSession = container.infrastructure.db_session()
    try:
        yield session
    finally:
        await session.close()


def get_query_cache() -> TTLCache:
    """FastAPI dependency for the process-local query cache."""
    return container.query_cache()


# ============================================
# Celery Integration
# ============================================


class TaskScope:
    """Async context manager for one Celery task run.

    Each task runs its own event loop via asyncio.run(), so loop-bound
    resources (engine connections, HTTP client) are released and the
    singletons reset when the scope exits.

    Usage:
        async with TaskScope() as scope:
            config = scope.configs.hackernews_config()
            async with scope.infrastructure.db_session() as session:
                ...
    """

    def __init__(self, app_container: ApplicationContainer | None = None) -> None:
        self._container = app_container or container

    async def __aenter__(self) -> ApplicationContainer:
        return self._container

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        infrastructure = self._container.infrastructure

        # Only release what this scope actually created
        http_provider = infrastructure.http_client
        if not http_provider.overridden:
            http_client = http_provider()
            await http_client.close()
            http_provider.reset()

        engine_provider = infrastructure.db_engine
        if not engine_provider.overridden:
            await engine_provider().dispose()
            infrastructure.db_session_factory.reset()
            engine_provider.reset()


__all__ = [
    "ApplicationContainer",
    "container",
    "create_container",
    "get_db_session",
    "get_query_cache",
    "TaskScope",
]
