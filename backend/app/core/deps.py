"""FastAPI dependencies for the print service and caller's laboratory."""

from functools import lru_cache
from typing import Annotated

from fastapi import Header

from app.config import settings
from app.services.mobile_print import MobilePrintService
from app.services.print_job_store import PrintJobStore


@lru_cache
def get_print_service() -> MobilePrintService:
    """Process-wide print service bound to the configured job directory."""
    return MobilePrintService(PrintJobStore(settings.PRINT_JOBS_DIR))


async def get_laboratory_id(
    x_laboratory_id: Annotated[str | None, Header()] = None,
) -> str:
    """Laboratory of the caller.

    Authentication happens upstream; the gateway forwards the lab id as
    X-Laboratory-ID. Direct callers fall back to the configured default.
    """
    return (x_laboratory_id or "").strip() or settings.DEFAULT_LABORATORY_ID
