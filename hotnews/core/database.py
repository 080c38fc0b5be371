"""Database configuration and engine helpers.

This module provides the SQLAlchemy 2.0 declarative base, async engine
construction and schema/health helpers. Engines and session factories are
owned by the DI container (see hotnews.core.container).
"""

import re
from typing import Any, ClassVar

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase, declared_attr

from hotnews.core.config import Config
from hotnews.core.logging import get_logger

logger = get_logger(__name__)

# ============================================
# Naming Convention
# ============================================
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ============================================
# Base Model
# ============================================


class Base(DeclarativeBase):
    """Base class for all ORM models.

    Provides:
    - Consistent table naming (snake_case)
    - Metadata with naming conventions
    - __repr__ implementation
    """

    metadata: ClassVar[MetaData] = metadata

    @declared_attr.directive
    @classmethod
    def __tablename__(cls) -> str:
        """Generate table name from class name.

        Returns:
            Snake case table name
        """
        return re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).lower()

    def __repr__(self) -> str:
        """String representation of model instance."""
        columns = ", ".join(
            f"{k}={v!r}"
            for k, v in self.__dict__.items()
            if not k.startswith("_") and k != "metadata"
        )
        return f"{self.__class__.__name__}({columns})"


# ============================================
# Engine
# ============================================


def create_engine(config: Config) -> AsyncEngine:
    """Create the async engine described by the configuration.

    Pool sizing only applies to server databases; SQLite uses its default pool.

    Args:
        config: Application configuration

    Returns:
        Configured async engine
    """
    kwargs: dict[str, Any] = {"echo": config.database_echo}
    if not config.database_url.startswith("sqlite"):
        kwargs.update(
            pool_size=config.database_pool_size,
            max_overflow=config.database_max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
    return create_async_engine(config.database_url, **kwargs)


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables.

    This is mainly for development/testing. In production, use Alembic migrations.

    Args:
        engine: Async engine to create the schema on
    """
    # Models must be imported so they register on Base.metadata
    import hotnews.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized")


async def check_db_connection(engine: AsyncEngine) -> bool:
    """Check if database connection is healthy.

    Args:
        engine: Async engine to check

    Returns:
        True if connection is successful, False otherwise
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Database health check failed", error=str(e), exc_info=True)
        return False


__all__ = [
    "Base",
    "metadata",
    "create_engine",
    "init_db",
    "check_db_connection",
]
