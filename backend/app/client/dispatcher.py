"""Create a print job and deliver it with the chosen method."""

import logging
import time

from app.client.platform import Platform, ShareError, SharedFile
from app.client.print_client import MobilePrintClient, PrintServiceError
from app.models.enums import PrintMethod
from app.schemas.print_job import PrintJobRequest, PrintJobResult

logger = logging.getLogger(__name__)

PRINT_WINDOW_SIZE = (800, 600)
POPUP_BLOCKED_MESSAGE = "Please allow popups to use mobile browser printing"
EMAIL_PROMPT = "Enter printer email address:"
EMAIL_SENT_MESSAGE = "Email sent to printer successfully!"
EMAIL_FAILED_MESSAGE = "Failed to send email to printer"


def download_filename() -> str:
    return f"qr-labels-{int(time.time() * 1000)}.pdf"


class DeliveryDispatcher:
    """One POST to create the job, then exactly one delivery branch.

    ``dispatch`` does both; callers that must keep the job id when delivery
    fails call ``client.create_job`` and ``deliver`` separately. Errors from
    either step propagate.
    """

    def __init__(self, client: MobilePrintClient, platform: Platform):
        self.client = client
        self.platform = platform
        self._handlers = {
            PrintMethod.MOBILE_BROWSER: self._browser_print,
            PrintMethod.PDF_DOWNLOAD: self._pdf_download,
            PrintMethod.EMAIL_TO_PRINTER: self._email_to_printer,
            PrintMethod.NATIVE_SHARE: self._native_share,
        }

    async def dispatch(self, request: PrintJobRequest) -> PrintJobResult:
        result = await self.client.create_job(request)
        await self.deliver(result, request.print_method)
        return result

    async def deliver(self, result: PrintJobResult, method: PrintMethod) -> None:
        await self._handlers[method](result)

    async def _browser_print(self, result: PrintJobResult) -> None:
        sep = "&" if "?" in result.download_url else "?"
        url = f"{result.download_url}{sep}autoprint=1"
        if not self.platform.open_print_window(url, *PRINT_WINDOW_SIZE):
            self.platform.alert(POPUP_BLOCKED_MESSAGE)

    async def _pdf_download(self, result: PrintJobResult) -> None:
        await self.platform.trigger_download(result.pdf_url or result.download_url, download_filename())

    async def _email_to_printer(self, result: PrintJobResult) -> None:
        email = self.platform.prompt(EMAIL_PROMPT)
        if not email:
            return

        try:
            sent = await self.client.email_to_printer(result.job_id, email)
        except PrintServiceError as exc:
            logger.warning("Email to printer for job %s failed: %s", result.job_id, exc)
            sent = False

        self.platform.alert(EMAIL_SENT_MESSAGE if sent else EMAIL_FAILED_MESSAGE)

    async def _native_share(self, result: PrintJobResult) -> None:
        if not self.platform.supports_share:
            await self._pdf_download(result)
            return

        try:
            data = await self.client.fetch_file(result.pdf_url or result.download_url)
            await self.platform.share(
                title="QR Code Labels",
                text="Mosquito pool QR code labels",
                files=[SharedFile("qr-labels.pdf", data, "application/pdf")],
            )
        except (PrintServiceError, ShareError) as exc:
            logger.info("Share failed for job %s (%s); downloading instead", result.job_id, exc)
            await self._pdf_download(result)
