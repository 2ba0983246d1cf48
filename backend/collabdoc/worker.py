"""Celery application and beat schedule.

Run the worker and scheduler with:

    celery -A collabdoc.worker worker --beat --loglevel=info
"""

from celery import Celery

from .config import get_settings
from .observability.logging_config import configure_logging

settings = get_settings()

configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

celery_app = Celery(
    "collabdoc",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["collabdoc.retention.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
)

celery_app.conf.beat_schedule = {
    "retention-sweep": {
        "task": "retention.sweep_documents",
        "schedule": float(settings.RETENTION_SWEEP_INTERVAL_SECONDS),
        "options": {
            # Skip a run that could not start before the next one is due
            "expires": settings.RETENTION_SWEEP_INTERVAL_SECONDS,
        },
    },
}
