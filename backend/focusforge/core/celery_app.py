"""
Celery application for FocusForge background work.

Tasks:
- AI insight refresh after completed sessions (queue "insights")

Progression itself never runs here: rewards are applied synchronously
under the per-user lock. The worker only regenerates derived data.
"""

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from focusforge.core.config import get_settings

settings = get_settings()

celery_app = Celery(
    "focusforge",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "focusforge.tasks.insight_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    # A provider call plus one profile read and one cache write
    task_soft_time_limit=int(settings.insight_timeout_seconds) + 15,
    task_time_limit=int(settings.insight_timeout_seconds) + 30,
    task_routes={
        "focusforge.tasks.insight_tasks.*": {"queue": "insights"},
    },
    result_expires=3600,
    worker_prefetch_multiplier=1,
    worker_concurrency=4,
)


@celery_setup_logging.connect
def configure_worker_logging(**kwargs) -> None:
    """Use the API's log format in the worker instead of Celery's default."""
    from focusforge.core.logging_config import setup_logging

    setup_logging()
