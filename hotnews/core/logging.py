"""Structured logging configuration using structlog.

Every module logs through ``get_logger(__name__)``. ``setup_logging()`` is
called once per process (on import of ``hotnews.main`` and in the test session).

Events carry ``app`` and ``env``, and inside a collection run also the
``collector`` being run, so interleaved worker output can be told apart.
Production renders JSON lines, development renders coloured console output.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from hotnews.core.config import get_config

# Loggers that emit one line per request; kept at WARNING unless debugging
NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")


def app_context_processor(app: str, env: str) -> Processor:
    """Build a processor stamping every event with the app name and environment."""

    def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", app)
        event_dict.setdefault("env", env)
        return event_dict

    return add_app_context


def setup_logging(log_level: str | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        log_level: Override for ``Config.log_level`` (e.g. from a worker flag)
    """
    config = get_config()
    level = getattr(logging, (log_level or config.log_level).upper())

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if config.debug else max(level, logging.WARNING))

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        app_context_processor(config.app_name, config.app_env),
    ]

    if config.is_production:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        processors += [
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def collection_context(collector: str, **extra: Any) -> Iterator[None]:
    """Bind ``collector`` (and any extra keys) to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(collector=collector, **extra):
        yield


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Feed fetched", feed="OpenAI Blog", entries=10)
    """
    return structlog.get_logger(name)


__all__ = ["NOISY_LOGGERS", "collection_context", "get_logger", "setup_logging"]
