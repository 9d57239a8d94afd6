from celery import Celery

from app.config import settings

PURGE_INTERVAL_SECONDS = 3600

celery = Celery(
    "labguard_print",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

celery.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    enable_utc=True,
    timezone="UTC",
    beat_schedule={
        "purge-expired-print-jobs": {
            "task": "app.tasks.print_jobs.purge_expired_print_jobs",
            "schedule": PURGE_INTERVAL_SECONDS,
        },
    },
)

celery.autodiscover_tasks(["app.tasks"], related_name="print_jobs")
