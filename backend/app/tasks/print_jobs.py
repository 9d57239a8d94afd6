"""Celery tasks for print job retention and asynchronous email delivery."""

import logging
from datetime import timedelta

from app.celery_app import celery
from app.config import settings
from app.core.deps import get_print_service
from app.services.mobile_print import PrintJobError

logger = logging.getLogger(__name__)


@celery.task(name="app.tasks.print_jobs.purge_expired_print_jobs")
def purge_expired_print_jobs() -> dict:
    """Celery beat task: delete print jobs older than the retention window."""
    removed = get_print_service().purge_expired(
        timedelta(hours=settings.PRINT_JOB_RETENTION_HOURS)
    )
    return {"status": "ok", "removed": removed}


@celery.task(
    name="app.tasks.print_jobs.email_print_job",
    bind=True,
    max_retries=3,
)
def email_print_job(self, job_id: str, email: str, subject: str | None = None) -> bool:
    """Email a print job in the background, retrying SMTP failures."""
    try:
        get_print_service().email_job(job_id, email, subject)
        return True
    except LookupError:
        logger.warning("Print job %s vanished before it could be emailed", job_id)
        return False
    except PrintJobError as exc:
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))
