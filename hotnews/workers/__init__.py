"""Celery workers for hotnews.

This package contains Celery tasks and configuration for background processing.

Modules:
- celery_app: Celery application and Beat schedule
- collect: Collector tasks
- cleanup: Retention task
"""

from hotnews.workers.celery_app import celery_app

__all__ = ["celery_app"]
