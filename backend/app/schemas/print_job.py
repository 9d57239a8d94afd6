"""Print job request/response schemas.

Wire format is camelCase JSON (``poolId``, ``printFormat`` ...); Python code
uses the snake_case attribute names.
"""

from datetime import date, datetime

from pydantic import EmailStr, Field, field_validator

from app.config import settings
from app.models.enums import (
    ClientJobStatus,
    LabelSize,
    PaperType,
    PrinterType,
    PrintFormat,
    PrintJobStatus,
    PrintMethod,
    PrintPriority,
)
from app.schemas import CamelModel


# --- Samples ---

class SampleRecord(CamelModel):
    """Collection metadata for one mosquito pool."""

    pool_id: str = Field(..., min_length=1)
    trap_id: str | None = None
    collection_date: date | None = None
    latitude: float | None = None
    longitude: float | None = None
    species: str | None = None
    collected_by: str | None = None
    laboratory_id: str = Field(..., min_length=1)

    @field_validator("collection_date", mode="before")
    @classmethod
    def truncate_timestamp(cls, v):
        # Field apps send full ISO timestamps; labels only carry the day.
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        if isinstance(v, datetime):
            return v.date()
        return v


# --- Print job requests ---

class PrintOptions(CamelModel):
    include_border: bool = False
    include_text: bool = False
    include_logo: bool = False
    paper_type: PaperType = PaperType.STANDARD


class PrintJobRequest(CamelModel):
    """Body of ``POST /api/mobile-print/create-job``."""

    qr_codes: list[SampleRecord] = Field(..., min_length=1)
    print_format: PrintFormat
    label_size: LabelSize
    copies: int = Field(1, ge=1)
    priority: PrintPriority = PrintPriority.NORMAL
    options: PrintOptions = Field(default_factory=PrintOptions)
    print_method: PrintMethod

    @field_validator("qr_codes")
    @classmethod
    def within_label_limit(cls, v: list[SampleRecord]) -> list[SampleRecord]:
        if len(v) > settings.MAX_LABELS_PER_JOB:
            raise ValueError(
                f"A print job may contain at most {settings.MAX_LABELS_PER_JOB} labels"
            )
        return v

    @field_validator("copies")
    @classmethod
    def within_copy_limit(cls, v: int) -> int:
        if v > settings.MAX_COPIES:
            raise ValueError(f"copies must be at most {settings.MAX_COPIES}")
        return v


class EmailToPrinterRequest(CamelModel):
    job_id: str = Field(..., min_length=1)
    email: EmailStr
    subject: str | None = None
    deferred: bool = False


# --- Print job records ---

class PrintJob(CamelModel):
    """Stored print job, as returned by the print service."""

    id: str
    qr_codes: list[SampleRecord]
    format: PrintFormat
    label_size: LabelSize
    copies: int = 1
    priority: PrintPriority = PrintPriority.NORMAL
    options: PrintOptions = Field(default_factory=PrintOptions)
    print_method: PrintMethod
    status: PrintJobStatus = PrintJobStatus.PENDING
    laboratory_id: str
    label_count: int = 0
    pages_needed: int = 0
    created_at: datetime
    completed_at: datetime | None = None
    download_url: str | None = None
    pdf_url: str | None = None
    email_sent: bool = False
    error_message: str | None = None


class PrintJobResult(CamelModel):
    """What the print client keeps from a created job."""

    job_id: str
    download_url: str
    pdf_url: str | None = None
    status: ClientJobStatus = ClientJobStatus.READY


# --- Printers ---

class PrinterStatus(CamelModel):
    id: str
    name: str
    type: PrinterType
    connection: str
    is_online: bool = True
    has_error: bool = False
    error_message: str | None = None
    mobile_compatible: bool = True
    email_address: str | None = None
    total_jobs: int = 0


class PrinterTestResult(CamelModel):
    success: bool
    message: str
    latency_ms: float | None = None
