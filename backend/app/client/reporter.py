"""Surface the outcome of a print submission to the user."""

import logging
from collections.abc import Callable

from app.client.platform import Platform
from app.client.print_client import DeliveryUnsupportedError, PrintServiceError
from app.schemas.print_job import PrintJobResult

logger = logging.getLogger(__name__)


def classify_error(exc: Exception) -> str:
    """``network`` for service/transport errors, ``unsupported`` for an
    unavailable method, ``delivery`` for anything that failed on the device."""
    if isinstance(exc, DeliveryUnsupportedError):
        return "unsupported"
    if isinstance(exc, PrintServiceError):
        return "network"
    return "delivery"


class JobStatusReporter:
    """Tracks the last created job and alerts on failures.

    A job id recorded with ``job_created`` survives a later delivery failure:
    the job exists on the service even if it never reached the printer.
    """

    def __init__(self, platform: Platform, on_complete: Callable[[str], None] | None = None):
        self.platform = platform
        self.on_complete = on_complete
        self.job_id: str | None = None
        self.error: str | None = None
        self.error_kind: str | None = None

    def reset(self) -> None:
        self.job_id = None
        self.error = None
        self.error_kind = None

    def job_created(self, result: PrintJobResult) -> None:
        self.job_id = result.job_id

    def report(self, outcome: PrintJobResult | Exception) -> None:
        if isinstance(outcome, Exception):
            self.error = str(outcome) or type(outcome).__name__
            self.error_kind = classify_error(outcome)
            logger.warning(
                "Print failed (%s) for job %s: %s", self.error_kind, self.job_id, self.error
            )
            self.platform.alert(f"Print failed: {self.error}")
            return

        self.job_id = outcome.job_id
        self.error = None
        self.error_kind = None
        if self.on_complete is not None:
            self.on_complete(outcome.job_id)
