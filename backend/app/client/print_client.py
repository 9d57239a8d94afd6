"""Async HTTP client for the mobile print service API."""

import logging
from typing import Any

import httpx

from app.config import settings
from app.models.enums import ClientJobStatus, PrintJobStatus
from app.schemas.print_job import PrintJobRequest, PrintJobResult

logger = logging.getLogger(__name__)

CREATE_JOB_PATH = "/api/mobile-print/create-job"
EMAIL_TO_PRINTER_PATH = "/api/mobile-print/email-to-printer"

CLIENT_STATUS = {
    PrintJobStatus.PENDING: ClientJobStatus.PENDING,
    PrintJobStatus.GENERATING: ClientJobStatus.PENDING,
    PrintJobStatus.READY: ClientJobStatus.READY,
    PrintJobStatus.COMPLETED: ClientJobStatus.READY,
    PrintJobStatus.FAILED: ClientJobStatus.FAILED,
}


class PrintServiceError(Exception):
    """The print service could not be reached or refused the request."""


class DeliveryUnsupportedError(Exception):
    """The chosen delivery method is not available on this device."""


class MobilePrintClient:
    """Thin async wrapper around the mobile print endpoints.

    Every call opens its own connection; nothing is retried.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.PRINT_SERVICE_URL).rstrip("/")
        self.timeout = timeout or settings.CLIENT_TIMEOUT_SECONDS
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        )

    def absolute_url(self, url: str) -> str:
        """Resolve a service-relative URL such as ``/api/mobile-print/download/x.html``."""
        return str(httpx.URL(self.base_url + "/").join(url))

    async def _post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.post(path, json=body)
        except httpx.HTTPError as exc:
            raise PrintServiceError(f"Network error: {exc}") from exc

    async def create_job(self, request: PrintJobRequest) -> PrintJobResult:
        """Create a print job. Raises PrintServiceError on any failure."""
        resp = await self._post(
            CREATE_JOB_PATH, request.model_dump(mode="json", by_alias=True)
        )

        try:
            result = resp.json()
        except ValueError:
            result = {}

        if resp.is_error:
            message = result.get("message") if isinstance(result, dict) else None
            raise PrintServiceError(message or f"HTTP error! status: {resp.status_code}")
        if not isinstance(result, dict) or not result.get("success"):
            message = result.get("message") if isinstance(result, dict) else None
            raise PrintServiceError(message or "Failed to create print job")

        try:
            job = result["data"]["printJob"]
            job_id = job["id"]
            download_url = job["downloadUrl"]
        except (KeyError, TypeError):
            raise PrintServiceError("Print service returned an incomplete print job")

        try:
            status = CLIENT_STATUS[PrintJobStatus(job.get("status", PrintJobStatus.READY))]
        except ValueError:
            raise PrintServiceError(f"Print service returned an unknown job status: {job.get('status')}")

        logger.info("Print job %s created", job_id)
        return PrintJobResult(
            job_id=job_id,
            download_url=self.absolute_url(download_url),
            pdf_url=self.absolute_url(job["pdfUrl"]) if job.get("pdfUrl") else None,
            status=status,
        )

    async def email_to_printer(self, job_id: str, email: str) -> bool:
        """Ask the service to email a job to a printer. True if accepted."""
        resp = await self._post(EMAIL_TO_PRINTER_PATH, {"jobId": job_id, "email": email})
        if resp.is_error:
            logger.warning(
                "Email to printer for job %s failed with status %d", job_id, resp.status_code
            )
        return resp.is_success

    async def fetch_file(self, url: str) -> bytes:
        """Download a rendered job document as bytes."""
        try:
            async with self._client() as client:
                resp = await client.get(self.absolute_url(url))
                resp.raise_for_status()
                return resp.content
        except httpx.HTTPError as exc:
            raise PrintServiceError(f"Could not fetch {url}: {exc}") from exc
