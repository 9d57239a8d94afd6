"""
Unit tests for the QR generator front end state and the job status reporter.
"""

import asyncio
import dataclasses
from unittest.mock import patch

import httpx

from app.client.generator import MobileQRGenerator
from app.client.print_client import DeliveryUnsupportedError, MobilePrintClient, PrintServiceError
from app.client.reporter import JobStatusReporter, classify_error
from app.models.enums import LabelSize, PrintFormat, PrintMethod
from app.schemas.print_job import PrintJobResult
from app.services.qr_code import generate_preview
from helpers import FakePlatform, make_sample

CREATED = {"success": True, "data": {"printJob": {"id": "J1", "downloadUrl": "https://x/pdf"}}}


def make_generator(platform=None, handler=None, on_complete=None, count=3):
    requests = []

    def default_handler(request):
        requests.append(request)
        return httpx.Response(201, json=CREATED)

    client = MobilePrintClient("http://print.test", transport=httpx.MockTransport(handler or default_handler))
    generator = MobileQRGenerator(
        [make_sample(f"POOL-{i}") for i in range(count)],
        client,
        platform or FakePlatform(),
        on_print_complete=on_complete,
    )
    return generator, requests


# ============================================================
# JobStatusReporter
# ============================================================

def test_reporter_success_calls_callback():
    completed = []
    reporter = JobStatusReporter(FakePlatform(), on_complete=completed.append)
    reporter.report(PrintJobResult(job_id="J1", download_url="https://x/pdf"))

    assert reporter.job_id == "J1"
    assert completed == ["J1"]


def test_reporter_failure_alerts_verbatim():
    platform = FakePlatform()
    reporter = JobStatusReporter(platform)
    reporter.report(PrintServiceError("HTTP error! status: 500"))

    assert platform.alerts == ["Print failed: HTTP error! status: 500"]
    assert reporter.job_id is None
    assert reporter.error_kind == "network"


def test_reporter_classifies_unsupported_delivery():
    reporter = JobStatusReporter(FakePlatform())
    reporter.report(DeliveryUnsupportedError("no share"))
    assert reporter.error_kind == "unsupported"


def test_classify_error_kinds():
    assert classify_error(PrintServiceError("HTTP error! status: 502")) == "network"
    assert classify_error(DeliveryUnsupportedError("no share")) == "unsupported"
    assert classify_error(OSError("disk full")) == "delivery"


def test_reporter_keeps_created_job_on_failure():
    reporter = JobStatusReporter(FakePlatform())
    reporter.job_created(PrintJobResult(job_id="J9", download_url="https://x/pdf"))
    reporter.report(OSError("disk full"))

    assert reporter.job_id == "J9"
    assert reporter.error == "disk full"


# ============================================================
# MobileQRGenerator
# ============================================================

def test_defaults():
    generator, _ = make_generator()

    assert generator.selected_format == PrintFormat.SHEET_LAYOUT
    assert generator.selected_method == PrintMethod.MOBILE_BROWSER
    assert generator.settings.label_size == LabelSize.MEDIUM_25MM
    assert generator.settings.include_text is True
    assert generator.settings.include_border is False
    assert generator.settings.copies == 1


def test_preview_recomputed_when_settings_change():
    generator, _ = make_generator()
    with patch("app.client.generator.generate_preview", wraps=generate_preview) as mock:
        first = generator.preview
        assert generator.preview is first
        generator.settings = dataclasses.replace(generator.settings, include_border=True)
        generator.preview
        generator.samples = [make_sample("OTHER")]
        generator.preview

    assert mock.call_count == 3
    assert first.available is True


def test_available_methods_follow_platform():
    offline, _ = make_generator(FakePlatform(online=False, can_share=False))
    sharing, _ = make_generator(FakePlatform(online=True, can_share=True))

    assert offline.available_methods() == [PrintMethod.MOBILE_BROWSER, PrintMethod.PDF_DOWNLOAD]
    assert sharing.available_methods() == [
        PrintMethod.MOBILE_BROWSER,
        PrintMethod.PDF_DOWNLOAD,
        PrintMethod.EMAIL_TO_PRINTER,
        PrintMethod.NATIVE_SHARE,
    ]


def test_format_options_describe_pages():
    generator, _ = make_generator(count=13)
    summaries = {o["id"]: o["summary"] for o in generator.format_options()}

    assert summaries[PrintFormat.SHEET_LAYOUT] == "2 pages needed for 13 samples"
    assert summaries[PrintFormat.INDIVIDUAL_LABELS] == "13 pages needed for 13 samples"
    assert summaries[PrintFormat.ADHESIVE_LABELS] == "1 page needed for 13 samples"


def test_build_request_uses_settings():
    generator, _ = make_generator()
    generator.selected_method = PrintMethod.PDF_DOWNLOAD
    generator.settings = dataclasses.replace(generator.settings, copies=0, include_logo=True)
    request = generator.build_request()

    assert request.copies == 1
    assert request.options.include_logo is True
    assert request.options.include_text is True
    assert request.print_method == PrintMethod.PDF_DOWNLOAD


def test_print_labels_success():
    completed = []
    platform = FakePlatform()
    generator, requests = make_generator(platform, on_complete=completed.append)
    generator.selected_method = PrintMethod.PDF_DOWNLOAD

    job_id = asyncio.run(generator.print_labels())

    assert job_id == "J1"
    assert generator.generated_job_id == "J1"
    assert completed == ["J1"]
    assert generator.is_generating is False
    assert len(requests) == 1
    assert len(platform.downloads) == 1


def test_print_labels_network_error_reported():
    def unreachable(request):
        raise httpx.ConnectError("connection refused")

    platform = FakePlatform()
    generator, _ = make_generator(platform, handler=unreachable)
    generator.selected_method = PrintMethod.PDF_DOWNLOAD

    assert asyncio.run(generator.print_labels()) is None
    assert platform.side_effects == []
    assert len(platform.alerts) == 1
    assert platform.alerts[0].startswith("Print failed: Network error")
    assert generator.generated_job_id is None
    assert generator.is_generating is False


def test_print_labels_unavailable_method():
    platform = FakePlatform(can_share=False)
    generator, requests = make_generator(platform)
    generator.selected_method = PrintMethod.NATIVE_SHARE

    assert asyncio.run(generator.print_labels()) is None
    assert requests == []
    assert platform.alerts == ["Print failed: Share/AirDrop is not available on this device"]
    assert generator.reporter.error_kind == "unsupported"


def test_print_labels_keeps_job_id_when_download_fails():
    completed = []
    platform = FakePlatform(download_error=OSError("disk full"))
    generator, requests = make_generator(platform, on_complete=completed.append)
    generator.selected_method = PrintMethod.PDF_DOWNLOAD

    job_id = asyncio.run(generator.print_labels())

    assert job_id == "J1"
    assert generator.generated_job_id == "J1"
    assert platform.alerts == ["Print failed: disk full"]
    assert generator.reporter.error_kind == "delivery"
    assert completed == []
    assert generator.is_generating is False
    assert len(requests) == 1


def test_print_labels_unexpected_delivery_error_does_not_escape():
    platform = FakePlatform(download_error=RuntimeError())
    generator, _ = make_generator(platform)
    generator.selected_method = PrintMethod.PDF_DOWNLOAD

    assert asyncio.run(generator.print_labels()) == "J1"
    assert platform.alerts == ["Print failed: RuntimeError"]
    assert generator.reporter.error_kind == "delivery"


def test_print_labels_clears_previous_failure():
    platform = FakePlatform(download_error=OSError("disk full"))
    generator, _ = make_generator(platform)
    generator.selected_method = PrintMethod.PDF_DOWNLOAD
    asyncio.run(generator.print_labels())

    platform.download_error = None
    asyncio.run(generator.print_labels())

    assert generator.reporter.error is None
    assert generator.reporter.error_kind is None
    assert generator.generated_job_id == "J1"
