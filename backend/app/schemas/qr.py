"""QR code payload and request/response schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas import CamelModel
from app.schemas.print_job import SampleRecord

PAYLOAD_VERSION = "1.0"
PAYLOAD_TYPE = "WNV_SAMPLE"


class QRPayload(BaseModel):
    """Compact payload embedded in a sample label's QR code.

    Keys are short to keep the QR symbol small. Optional keys are
    dropped from the serialized form when the sample does not carry them.
    """

    model_config = ConfigDict(frozen=True)

    v: str = PAYLOAD_VERSION
    t: str = PAYLOAD_TYPE
    p: str
    tr: str | None = None
    cd: str | None = None
    lab: str
    lat: float | None = None
    lng: float | None = None
    sp: str | None = None
    cb: str | None = None


class QrPreview(CamelModel):
    """On-screen preview of the first label in a batch.

    ``available`` is False when the image could not be rendered; the preview
    area then stays blank and ``reason`` says why.
    """

    available: bool
    data_url: str | None = None
    payload: str | None = None
    reason: str | None = None


class QrBatchRequest(CamelModel):
    samples: list[SampleRecord] = Field(..., min_length=1, max_length=100)


class QrValidateRequest(CamelModel):
    qr_data: str = Field(..., min_length=1)


class QrValidateResponse(CamelModel):
    valid: bool
    data: SampleRecord | None = None
    error: str | None = None
