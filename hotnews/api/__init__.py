"""HTTP API routers."""

from hotnews.api.news import router as news_router

__all__ = ["news_router"]
