"""Celery application configuration.

This module configures the Celery application and the Beat schedule that
drives collection and retention.
"""

from typing import Any

from celery import Celery
from celery.schedules import crontab

from hotnews.core.config import get_config

config = get_config()

# Create Celery app
celery_app = Celery(
    "hotnews",
    broker=str(config.celery_broker_url),
    backend=str(config.celery_result_backend),
    include=["hotnews.workers.collect", "hotnews.workers.cleanup"],
)

# Collector cadence (minutes past the hour, UTC)
BEAT_SCHEDULE: dict[str, dict[str, Any]] = {
    "collect-hackernews": {
        "task": "hotnews.workers.collect.collect_hackernews",
        "schedule": crontab(minute="*/10"),
        "options": {"queue": "collect"},
    },
    "collect-rss": {
        "task": "hotnews.workers.collect.collect_rss",
        "schedule": crontab(minute="*/30"),
        "options": {"queue": "collect"},
    },
    "collect-github": {
        "task": "hotnews.workers.collect.collect_github",
        "schedule": crontab(minute=0),
        "options": {"queue": "collect"},
    },
    "cleanup-old-items": {
        "task": "hotnews.workers.cleanup.cleanup_old_items",
        "schedule": crontab(minute=0, hour=3),
        "options": {"queue": "maintenance"},
    },
}

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=600,  # 10 minutes hard limit
    task_soft_time_limit=540,  # 9 minutes soft limit
    # Worker settings
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=100,
    # Result settings
    result_expires=86400,  # 24 hours
    # Beat scheduler settings
    beat_scheduler="celery.beat:PersistentScheduler",
    beat_schedule_filename="celerybeat-schedule",
    beat_schedule=BEAT_SCHEDULE,
    # Task routes
    task_routes={
        "hotnews.workers.collect.*": {"queue": "collect"},
        "hotnews.workers.cleanup.*": {"queue": "maintenance"},
    },
    # Default queue
    task_default_queue="default",
)

__all__ = ["BEAT_SCHEDULE", "celery_app"]
