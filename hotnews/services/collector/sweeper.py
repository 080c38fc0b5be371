"""Retention sweeper.

Deletes items whose publication time is older than the retention window.
Each sweep removes a bounded batch, oldest first, so a large backlog is
drained over several daily runs.
"""

from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hotnews.config.sources import RetentionConfig
from hotnews.core.exceptions import DatabaseError
from hotnews.core.logging import get_logger
from hotnews.services.collector.repository import ItemRepository

logger = get_logger(__name__)


class RetentionSweeper:
    """Deletes expired items in bounded batches."""

    def __init__(self, session: AsyncSession, config: RetentionConfig | None = None) -> None:
        """Initialize sweeper.

        Args:
            session: Database session (committed by the caller)
            config: Retention window and batch size (defaults: 30 days, 500 items)
        """
        self.session = session
        self.config = config or RetentionConfig()
        self.items = ItemRepository(session)

    def cutoff(self, now: datetime) -> datetime:
        return now - timedelta(days=self.config.max_age_days)

    async def sweep(self, now: datetime | None = None) -> int:
        """Delete one batch of expired items.

        Args:
            now: Reference time (defaults to current UTC time)

        Returns:
            Number of items deleted

        Raises:
            DatabaseError: If storage is unavailable
        """
        now = now or datetime.now(UTC)
        cutoff = self.cutoff(now)

        try:
            deleted = await self.items.delete_published_before(cutoff, self.config.batch_size)
        except SQLAlchemyError as e:
            logger.error("Retention sweep failed", error=str(e), exc_info=True)
            raise DatabaseError(
                f"Retention sweep failed: {e}",
                context={"cutoff": cutoff.isoformat()},
                operation="delete",
            ) from e

        logger.info("Retention sweep complete", deleted=deleted, cutoff=cutoff.isoformat())
        return deleted


__all__ = ["RetentionSweeper"]
