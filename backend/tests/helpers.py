"""Builders for sample records and print job requests used across tests."""

from datetime import date

from app.models.enums import LabelSize, PrintFormat, PrintMethod
from app.schemas.print_job import PrintJobRequest, PrintOptions, SampleRecord


def make_sample(pool_id="POOL-001", **overrides) -> SampleRecord:
    data = {
        "pool_id": pool_id,
        "trap_id": "TRAP-07",
        "collection_date": date(2024, 7, 15),
        "latitude": 33.45,
        "longitude": -112.07,
        "species": "Culex_tarsalis",
        "collected_by": "J. Ortiz",
        "laboratory_id": "LAB-AZ",
    }
    data.update(overrides)
    return SampleRecord(**data)


def make_request(count=1, **overrides) -> PrintJobRequest:
    data = {
        "qr_codes": [make_sample(f"POOL-{i:03d}") for i in range(1, count + 1)],
        "print_format": PrintFormat.SHEET_LAYOUT,
        "label_size": LabelSize.MEDIUM_25MM,
        "copies": 1,
        "options": PrintOptions(include_text=True),
        "print_method": PrintMethod.MOBILE_BROWSER,
    }
    data.update(overrides)
    return PrintJobRequest(**data)


def sample_json(pool_id="POOL-001", **overrides) -> dict:
    return make_sample(pool_id, **overrides).model_dump(mode="json", by_alias=True)


def request_json(count=1, **overrides) -> dict:
    body = {
        "qrCodes": [sample_json(f"POOL-{i:03d}") for i in range(1, count + 1)],
        "printFormat": "SHEET_LAYOUT",
        "labelSize": "MEDIUM_25MM",
        "copies": 1,
        "options": {"includeText": True},
        "printMethod": "MOBILE_BROWSER",
    }
    body.update(overrides)
    return body


class FakePlatform:
    """Records every delivery side effect instead of performing it."""

    def __init__(self, online=True, can_share=False, popups=True, email=None, share_error=None,
                 download_error=None):
        self.is_online = online
        self.supports_share = can_share
        self.popups = popups
        self.email = email
        self.share_error = share_error
        self.download_error = download_error
        self.windows: list[tuple[str, int, int]] = []
        self.downloads: list[tuple[str, str]] = []
        self.prompts: list[str] = []
        self.alerts: list[str] = []
        self.shared: list[dict] = []

    def open_print_window(self, url, width, height):
        self.windows.append((url, width, height))
        return self.popups

    async def trigger_download(self, url, filename):
        if self.download_error is not None:
            raise self.download_error
        self.downloads.append((url, filename))

    def prompt(self, message):
        self.prompts.append(message)
        return self.email

    def alert(self, message):
        self.alerts.append(message)

    async def share(self, title, text, files):
        if self.share_error is not None:
            raise self.share_error
        self.shared.append({"title": title, "text": text, "files": list(files)})

    @property
    def side_effects(self):
        return self.windows + self.downloads + self.shared
