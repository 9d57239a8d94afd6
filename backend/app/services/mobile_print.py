"""Mobile print job service.

Flow for one job:
  1. Expand samples by copies and render the label document for the format
  2. Store the job record and HTML next to each other (see PrintJobStore)
  3. Serve the HTML (or an on-demand PDF) from the download endpoint
  4. Optionally email the PDF to a printer's email-to-print address
"""

import logging
import secrets
import string
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path

from jinja2 import TemplateError
from qrcode.exceptions import DataOverflowError

from app.config import settings
from app.core.email import render_print_job_email, send_email, smtp_configured
from app.models.enums import PrinterType, PrintJobStatus, PrintMethod
from app.schemas.print_job import (
    PrinterStatus,
    PrinterTestResult,
    PrintJob,
    PrintJobRequest,
)
from app.services.label_layout import LABEL_SIZE_INFO, LAYOUTS, pages_needed
from app.services.label_renderer import render_labels_html, render_pdf
from app.services.print_job_store import PrintJobStore

logger = logging.getLogger(__name__)

DOWNLOAD_PREFIX = "/api/mobile-print/download"
DEFAULT_EMAIL_SUBJECT = "QR Code Labels for Printing"
PRINTER_STATS_WINDOW = 200

_ID_ALPHABET = string.ascii_lowercase + string.digits

METHOD_INFO: dict[PrintMethod, dict] = {
    PrintMethod.MOBILE_BROWSER: {
        "name": "Mobile Browser Print",
        "description": "Print directly from your mobile browser",
        "requirements": ["Modern web browser", "Printer connected to device"],
        "platforms": ["iOS Safari", "Android Chrome", "Desktop browsers"],
    },
    PrintMethod.PDF_DOWNLOAD: {
        "name": "Download PDF",
        "description": "Download PDF to print later or share",
        "requirements": ["PDF viewer app"],
        "platforms": ["All devices"],
    },
    PrintMethod.EMAIL_TO_PRINTER: {
        "name": "Email to Printer",
        "description": "Send to printer email address",
        "requirements": ["Email-enabled printer", "Internet connection"],
        "platforms": ["HP Smart", "Canon PRINT", "Epson Connect", "Brother Mobile Connect"],
    },
    PrintMethod.NATIVE_SHARE: {
        "name": "Share/AirDrop",
        "description": "Use device sharing options",
        "requirements": ["Native sharing support"],
        "platforms": ["iOS (AirDrop)", "Android (Share)", "Windows (Share)"],
    },
}


class PrintJobError(Exception):
    """A print job could not be rendered or delivered."""


def generate_print_job_id() -> str:
    """``MPJ_<epoch ms>_<9 base36 chars>``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"MPJ_{int(time.time() * 1000)}_{suffix}"


class MobilePrintService:
    def __init__(self, store: PrintJobStore):
        self.store = store

    # ── Jobs ──────────────────────────────────────────────────────────

    def create_job(self, request: PrintJobRequest, laboratory_id: str) -> PrintJob:
        """Render and store a print job for every label in ``request``."""
        job_id = generate_print_job_id()
        label_count = len(request.qr_codes) * request.copies

        job = PrintJob(
            id=job_id,
            qr_codes=request.qr_codes,
            format=request.print_format,
            label_size=request.label_size,
            copies=request.copies,
            priority=request.priority,
            options=request.options,
            print_method=request.print_method,
            status=PrintJobStatus.GENERATING,
            laboratory_id=laboratory_id,
            label_count=label_count,
            pages_needed=pages_needed(label_count, request.print_format),
            created_at=datetime.now(timezone.utc),
        )

        try:
            html_str = render_labels_html(
                job_id,
                request.qr_codes,
                request.print_format,
                request.label_size,
                request.options,
                copies=request.copies,
            )
            self.store.save_document(job_id, ".html", html_str)
        except (DataOverflowError, TemplateError, ValueError, OSError) as exc:
            job.status = PrintJobStatus.FAILED
            job.error_message = str(exc)
            self.store.save(job)
            logger.exception("Failed to create mobile print job %s", job_id)
            raise PrintJobError(f"Mobile print job creation failed: {exc}")

        job.download_url = f"{DOWNLOAD_PREFIX}/{job_id}.html"
        job.pdf_url = f"{DOWNLOAD_PREFIX}/{job_id}.pdf"
        job.status = PrintJobStatus.READY
        self.store.save(job)

        logger.info(
            "Mobile print job %s created for %d labels (%s, %s, lab %s)",
            job_id, label_count, request.print_format.value,
            request.print_method.value, laboratory_id,
        )
        return job

    def get_job(self, job_id: str) -> PrintJob | None:
        return self.store.get(job_id)

    def recent_jobs(self, limit: int = 10) -> list[PrintJob]:
        return self.store.list_recent(limit)

    def get_document(self, job_id: str, suffix: str) -> Path:
        """Path of a job's HTML or PDF document, rendering the PDF on first use.

        Raises LookupError if the job has no rendered document.
        """
        html_path = self.store.document_path(job_id, ".html")
        if html_path is None:
            raise LookupError("File not found")
        if suffix == ".html":
            return html_path

        pdf_path = self.store.document_path(job_id, ".pdf")
        if pdf_path is None:
            pdf_bytes = render_pdf(html_path.read_text(encoding="utf-8"))
            pdf_path = self.store.save_document(job_id, ".pdf", pdf_bytes)
            logger.info("Rendered PDF for print job %s (%d bytes)", job_id, len(pdf_bytes))
        return pdf_path

    # ── Email to printer ──────────────────────────────────────────────

    def email_job(self, job_id: str, email: str, subject: str | None = None) -> PrintJob:
        """Email a job's PDF to a printer's email-to-print address."""
        job = self.store.get(job_id)
        if job is None:
            raise LookupError("Print job not found")
        if job.status == PrintJobStatus.FAILED:
            raise ValueError("Print job failed and cannot be emailed.")

        pdf_path = self.get_document(job_id, ".pdf")
        sent = send_email(
            [email],
            subject or DEFAULT_EMAIL_SUBJECT,
            render_print_job_email(job.id, job.label_count, LAYOUTS[job.format].name),
            body_text=f"Print job {job.id}: {job.label_count} label(s). The PDF is attached.",
            attachments=[(f"{job.id}.pdf", pdf_path.read_bytes(), "pdf")],
        )
        if not sent:
            raise PrintJobError("Failed to email print job")

        job.email_sent = True
        job.status = PrintJobStatus.COMPLETED
        job.completed_at = datetime.now(timezone.utc)
        self.store.save(job)
        logger.info("Print job %s emailed to %s", job_id, email)
        return job

    # ── Printers ──────────────────────────────────────────────────────

    def _job_counts(self) -> dict[PrintMethod, int]:
        """Jobs per method among the newest ``PRINTER_STATS_WINDOW`` jobs."""
        counts = {method: 0 for method in PrintMethod}
        for job in self.store.list_recent(limit=PRINTER_STATS_WINDOW):
            counts[job.print_method] += 1
        return counts

    def available_printers(self) -> list[PrinterStatus]:
        counts = self._job_counts()
        printers = [
            PrinterStatus(
                id="mobile-browser",
                name="Mobile Browser Print",
                type=PrinterType.MOBILE_BROWSER,
                connection="BROWSER",
                total_jobs=counts[PrintMethod.MOBILE_BROWSER],
            ),
        ]
        if settings.PRINTER_EMAIL_ADDRESS:
            online = smtp_configured()
            printers.append(
                PrinterStatus(
                    id="email-print-001",
                    name="Email to Printer Service",
                    type=PrinterType.EMAIL_TO_PRINT,
                    connection="EMAIL",
                    is_online=online,
                    has_error=not online,
                    error_message=None if online else "SMTP is not configured",
                    email_address=settings.PRINTER_EMAIL_ADDRESS,
                    total_jobs=counts[PrintMethod.EMAIL_TO_PRINTER],
                )
            )
        return printers

    def test_printer(self, printer_id: str) -> PrinterTestResult:
        start = time.monotonic()

        if printer_id == "mobile-browser":
            success, message = True, "Mobile browser printing is available"
        elif printer_id.startswith("email-"):
            success = smtp_configured()
            message = (
                "Email-to-print service is available"
                if success
                else "Email-to-print service is not configured"
            )
        else:
            success, message = False, "Unknown printer type"

        return PrinterTestResult(
            success=success,
            message=message,
            latency_ms=round((time.monotonic() - start) * 1000, 1),
        )

    # ── Catalog ───────────────────────────────────────────────────────

    @staticmethod
    def catalog() -> dict:
        """Formats, delivery methods, and label sizes offered to clients."""
        return {
            "formats": [
                {
                    "id": fmt.value,
                    "name": layout.name,
                    "description": layout.description,
                    "qrCodesPerPage": layout.labels_per_page,
                    "paperType": layout.paper_type,
                    "recommended": layout.recommended,
                }
                for fmt, layout in LAYOUTS.items()
            ],
            "methods": [{"id": method.value, **info} for method, info in METHOD_INFO.items()],
            "supportedLabelSizes": [
                {"id": size.value, "name": name, "description": description}
                for size, (name, description) in LABEL_SIZE_INFO.items()
            ],
        }

    # ── Retention ─────────────────────────────────────────────────────

    def purge_expired(self, max_age: timedelta) -> int:
        removed = self.store.purge_older_than(datetime.now(timezone.utc) - max_age)
        if removed:
            logger.info("Purged %d expired print job(s)", removed)
        return removed

