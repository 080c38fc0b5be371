"""FastAPI application entry point.

This module creates and configures the FastAPI application instance.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hotnews import __version__
from hotnews.api.errors import register_exception_handlers
from hotnews.api.news import router as news_router
from hotnews.core.config import get_config
from hotnews.core.container import container
from hotnews.core.database import check_db_connection, init_db
from hotnews.core.logging import get_logger, setup_logging

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events.

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    config = get_config()
    engine = container.infrastructure.db_engine()
    logger.info("Starting hotnews API", env=config.app_env)

    # Create tables in development; production uses Alembic migrations
    if config.is_development:
        if await check_db_connection(engine):
            await init_db(engine)
        else:
            logger.warning("Database connection not available, skipping initialization")

    yield

    logger.info("Shutting down hotnews API")
    await engine.dispose()
    container.query_cache().invalidate()
    logger.info("Cleanup complete")


# Create FastAPI application
_config = get_config()
app = FastAPI(
    title=_config.app_name,
    description="AI news aggregation and ranking API",
    version=__version__,
    docs_url="/docs" if _config.is_development else None,
    redoc_url="/redoc" if _config.is_development else None,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_config.cors_origins,
    allow_credentials=_config.cors_allow_credentials,
    allow_methods=["GET"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(news_router)


# Health check endpoint
@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Health status
    """
    cfg = get_config()
    return {
        "status": "healthy",
        "app": cfg.app_name,
        "env": cfg.app_env,
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint.

    Returns:
        Welcome message
    """
    return {
        "message": "hotnews API",
        "version": __version__,
        "docs": "/docs" if get_config().is_development else "disabled",
    }
