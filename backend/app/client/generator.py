"""Front end state for printing QR labels for a batch of samples."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from app.client.builder import build_print_job, format_description
from app.client.dispatcher import DeliveryDispatcher
from app.client.platform import Platform
from app.client.print_client import (
    DeliveryUnsupportedError,
    MobilePrintClient,
    PrintServiceError,
)
from app.client.reporter import JobStatusReporter
from app.models.enums import LabelSize, PrintFormat, PrintMethod
from app.schemas.print_job import PrintJobRequest, PrintOptions, SampleRecord
from app.schemas.qr import QrPreview
from app.services.label_layout import LAYOUTS
from app.services.mobile_print import METHOD_INFO
from app.services.qr_code import generate_preview

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrintSettings:
    label_size: LabelSize = LabelSize.MEDIUM_25MM
    include_text: bool = True
    include_border: bool = False
    include_logo: bool = False
    copies: int = 1

    def options(self) -> PrintOptions:
        return PrintOptions(
            include_border=self.include_border,
            include_text=self.include_text,
            include_logo=self.include_logo,
        )


class MobileQRGenerator:
    """Holds the selected samples and print settings for one print dialog.

    ``print_labels`` is the only entry point that talks to the print service.
    It never raises: failures end up on ``reporter``.
    """

    def __init__(
        self,
        samples: Sequence[SampleRecord],
        client: MobilePrintClient,
        platform: Platform,
        on_print_complete: Callable[[str], None] | None = None,
    ):
        self.samples = list(samples)
        self.client = client
        self.platform = platform
        self.settings = PrintSettings()
        self.selected_format = PrintFormat.SHEET_LAYOUT
        self.selected_method = PrintMethod.MOBILE_BROWSER
        self.is_generating = False
        self.dispatcher = DeliveryDispatcher(client, platform)
        self.reporter = JobStatusReporter(platform, on_print_complete)
        self._preview: QrPreview | None = None
        self._preview_key: tuple | None = None

    @property
    def generated_job_id(self) -> str | None:
        return self.reporter.job_id

    @property
    def preview(self) -> QrPreview:
        # Any settings change invalidates the preview, not only the samples.
        key = (tuple(s.model_dump_json() for s in self.samples), self.settings)
        if key != self._preview_key:
            self._preview = generate_preview(self.samples)
            self._preview_key = key
        return self._preview

    def available_methods(self) -> list[PrintMethod]:
        methods = [PrintMethod.MOBILE_BROWSER, PrintMethod.PDF_DOWNLOAD]
        if self.platform.is_online:
            methods.append(PrintMethod.EMAIL_TO_PRINTER)
        if self.platform.supports_share:
            methods.append(PrintMethod.NATIVE_SHARE)
        return methods

    def format_options(self) -> list[dict]:
        count = len(self.samples)
        return [
            {
                "id": fmt,
                "name": layout.name,
                "description": layout.description,
                "summary": format_description(count, fmt),
                "recommended": layout.recommended,
            }
            for fmt, layout in LAYOUTS.items()
        ]

    def method_label(self, method: PrintMethod) -> str:
        return METHOD_INFO[method]["name"]

    def build_request(self) -> PrintJobRequest:
        return build_print_job(
            self.samples,
            self.selected_format,
            self.settings.label_size,
            self.settings.copies,
            self.settings.options(),
            self.selected_method,
        )

    async def print_labels(self) -> str | None:
        """Create and deliver the print job. Returns the job id once created.

        The id is kept even when delivery fails afterwards; the failure is
        alerted through ``reporter`` with kind ``delivery``.
        """
        self.is_generating = True
        self.reporter.reset()
        try:
            if self.selected_method not in self.available_methods():
                raise DeliveryUnsupportedError(
                    f"{self.method_label(self.selected_method)} is not available on this device"
                )
            result = await self.client.create_job(self.build_request())
        except (PrintServiceError, DeliveryUnsupportedError) as exc:
            self.is_generating = False
            self.reporter.report(exc)
            return None

        self.reporter.job_created(result)
        try:
            await self.dispatcher.deliver(result, self.selected_method)
        except Exception as exc:
            logger.exception("Delivery of print job %s failed", result.job_id)
            self.reporter.report(exc)
            return result.job_id
        finally:
            self.is_generating = False

        self.reporter.report(result)
        logger.info("Print job %s delivered via %s", result.job_id, self.selected_method.value)
        return result.job_id
