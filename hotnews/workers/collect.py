"""Collection Celery tasks.

One task per collector, scheduled by Celery Beat (see celery_app.BEAT_SCHEDULE).

Tasks:
- collect_hackernews: AI stories from Hacker News (every 10 minutes)
- collect_rss: Entries from the configured feeds (every 30 minutes)
- collect_github: Releases and trending repositories (hourly)

Storage failures fail the task without an in-process retry; the next Beat
tick runs the collection again, and the upserts make re-runs harmless.
"""

import asyncio
from typing import Any

from celery import shared_task
from celery.utils.log import get_task_logger
from pydantic import BaseModel

from hotnews.core.container import ApplicationContainer, TaskScope
from hotnews.models.source import SourceType
from hotnews.services.collector.base import CollectionResult
from hotnews.services.collector.pipeline import CollectionPipeline
from hotnews.services.collector.sources.factory import create_source

logger = get_task_logger(__name__)


def _collector_config(scope: ApplicationContainer, source_type: SourceType) -> BaseModel:
    """Resolve the collector config for a source type from the container."""
    providers = {
        SourceType.HACKERNEWS: scope.configs.hackernews_config,
        SourceType.RSS: scope.configs.rss_config,
        SourceType.GITHUB: scope.configs.github_config,
    }
    config: BaseModel = providers[source_type]()
    return config


async def run_collection(
    source_type: SourceType,
    app_container: ApplicationContainer | None = None,
) -> CollectionResult:
    """Run one collector against the database and commit.

    Args:
        source_type: Collector to run
        app_container: Container override (tests)

    Returns:
        CollectionResult of the run
    """
    async with TaskScope(app_container) as scope:
        collector = create_source(
            source_type,
            http_client=scope.infrastructure.http_client(),
            config=_collector_config(scope, source_type),
        )
        async with scope.infrastructure.db_session() as session:
            result = await CollectionPipeline(session).run(collector)
            await session.commit()
    return result


def _as_task_result(result: CollectionResult) -> dict[str, Any]:
    payload = result.model_dump(mode="json")
    payload["processed_count"] = result.processed_count
    return payload


def _collect(source_type: SourceType) -> dict[str, Any]:
    logger.info(f"Starting {source_type.value} collection")

    try:
        result = asyncio.run(run_collection(source_type))
    except Exception as exc:
        logger.error(f"{source_type.value} collection failed: {exc}", exc_info=True)
        raise

    logger.info(
        f"{source_type.value} collection complete: {result.processed_count} processed, "
        f"{result.inserted_count} new, {result.duplicate_count} duplicates"
    )
    return _as_task_result(result)


@shared_task(name="hotnews.workers.collect.collect_hackernews")
def collect_hackernews() -> dict[str, Any]:
    """Collect AI-related stories from Hacker News.

    Returns:
        CollectionResult as dict (with processed_count)
    """
    return _collect(SourceType.HACKERNEWS)


@shared_task(name="hotnews.workers.collect.collect_rss")
def collect_rss() -> dict[str, Any]:
    """Collect entries from every configured RSS/Atom feed.

    Returns:
        CollectionResult as dict (with processed_count)
    """
    return _collect(SourceType.RSS)


@shared_task(name="hotnews.workers.collect.collect_github")
def collect_github() -> dict[str, Any]:
    """Collect GitHub releases and trending repositories.

    Returns:
        CollectionResult as dict (with processed_count)
    """
    return _collect(SourceType.GITHUB)


__all__ = [
    "collect_github",
    "collect_hackernews",
    "collect_rss",
    "run_collection",
]
