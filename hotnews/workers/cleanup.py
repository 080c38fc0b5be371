"""Retention Celery task.

Runs daily at 03:00 UTC and deletes one bounded batch of expired items.
"""

import asyncio
from typing import Any

from celery import shared_task
from celery.utils.log import get_task_logger

from hotnews.core.container import ApplicationContainer, TaskScope
from hotnews.services.collector.sweeper import RetentionSweeper

logger = get_task_logger(__name__)


async def run_cleanup(app_container: ApplicationContainer | None = None) -> int:
    """Sweep expired items and commit.

    Returns:
        Number of items deleted
    """
    async with TaskScope(app_container) as scope:
        async with scope.infrastructure.db_session() as session:
            sweeper = RetentionSweeper(session, scope.configs.retention_config())
            deleted = await sweeper.sweep()
            await session.commit()
    return deleted


@shared_task(name="hotnews.workers.cleanup.cleanup_old_items")
def cleanup_old_items() -> dict[str, Any]:
    """Delete items published more than 30 days ago (at most 500 per run).

    Returns:
        {"deleted": <count>}
    """
    logger.info("Starting retention sweep")

    try:
        deleted = asyncio.run(run_cleanup())
    except Exception as exc:
        logger.error(f"Retention sweep failed: {exc}", exc_info=True)
        raise

    logger.info(f"Retention sweep complete: {deleted} items deleted")
    return {"deleted": deleted}


__all__ = ["cleanup_old_items", "run_cleanup"]
