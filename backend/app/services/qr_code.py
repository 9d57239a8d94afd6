"""QR code payload encoding and image generation for sample labels."""

import base64
import io
import json
import logging
import zipfile
from collections.abc import Sequence

import qrcode
from PIL import Image, ImageDraw, ImageFont
from qrcode.constants import ERROR_CORRECT_H
from qrcode.exceptions import DataOverflowError

from app.core.sanitize import sanitize_filename
from app.schemas.print_job import SampleRecord
from app.schemas.qr import PAYLOAD_TYPE, PAYLOAD_VERSION, QRPayload, QrPreview

logger = logging.getLogger(__name__)


class QrDecodeError(ValueError):
    """A scanned string is not a sample label payload."""


# --- Payload ---

def encode_payload(sample: SampleRecord) -> QRPayload:
    """Build the compact label payload for a sample. Never fails."""
    return QRPayload(
        p=sample.pool_id,
        tr=sample.trap_id,
        cd=sample.collection_date.isoformat() if sample.collection_date else None,
        lab=sample.laboratory_id,
        lat=sample.latitude,
        lng=sample.longitude,
        sp=sample.species,
        cb=sample.collected_by,
    )


def payload_to_string(payload: QRPayload) -> str:
    return json.dumps(payload.model_dump(exclude_none=True), separators=(",", ":"))


def decode_payload(text: str) -> SampleRecord:
    """Parse a scanned label string back into a sample record."""
    try:
        raw = json.loads(text)
    except (TypeError, ValueError):
        raise QrDecodeError("Invalid JSON format")

    if not isinstance(raw, dict) or raw.get("v") != PAYLOAD_VERSION or raw.get("t") != PAYLOAD_TYPE:
        raise QrDecodeError("Invalid QR code format")

    if not all(raw.get(key) for key in ("p", "tr", "cd", "lab")):
        raise QrDecodeError("Missing required sample data")

    try:
        return SampleRecord(
            pool_id=raw["p"],
            trap_id=raw["tr"],
            collection_date=raw["cd"],
            laboratory_id=raw["lab"],
            latitude=raw.get("lat"),
            longitude=raw.get("lng"),
            species=raw.get("sp"),
            collected_by=raw.get("cb"),
        )
    except ValueError as exc:
        raise QrDecodeError(f"Invalid sample data: {exc}")


# --- Images ---

def _make_qr_image(data: str, box_size: int, border: int) -> Image.Image:
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_H,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)
    return qr.make_image(fill_color="black", back_color="white").convert("RGB")


def generate_qr_png(data: str, box_size: int = 10, border: int = 2) -> bytes:
    """Render ``data`` as a bare QR code PNG."""
    buf = io.BytesIO()
    _make_qr_image(data, box_size, border).save(buf, format="PNG")
    return buf.getvalue()


def qr_data_url(data: str, box_size: int = 10, border: int = 2) -> str:
    """Render ``data`` as a PNG ``data:`` URL for inline <img> tags."""
    encoded = base64.b64encode(generate_qr_png(data, box_size, border)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def _load_font(size: int) -> ImageFont.ImageFont:
    try:
        return ImageFont.truetype("arial.ttf", size)
    except OSError:
        try:
            return ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", size)
        except OSError:
            return ImageFont.load_default()


def generate_sample_qr(sample: SampleRecord) -> bytes:
    """Generate a QR code PNG for a sample with its pool id printed below."""
    qr_img = _make_qr_image(payload_to_string(encode_payload(sample)), box_size=10, border=2)

    # Add text label below
    qr_w, qr_h = qr_img.size
    label_height = 30
    combined = Image.new("RGB", (qr_w, qr_h + label_height), "white")
    combined.paste(qr_img, (0, 0))

    draw = ImageDraw.Draw(combined)
    font = _load_font(16)
    caption = sample.pool_id

    bbox = draw.textbbox((0, 0), caption, font=font)
    text_w = bbox[2] - bbox[0]
    text_x = (qr_w - text_w) // 2
    text_y = qr_h + (label_height - (bbox[3] - bbox[1])) // 2
    draw.text((text_x, text_y), caption, fill="black", font=font)

    buf = io.BytesIO()
    combined.save(buf, format="PNG")
    return buf.getvalue()


def generate_batch_qr(samples: Sequence[SampleRecord]) -> io.BytesIO:
    """Generate a ZIP file containing one captioned QR PNG per sample."""
    zip_buf = io.BytesIO()
    used: dict[str, int] = {}
    with zipfile.ZipFile(zip_buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for sample in samples:
            stem = sanitize_filename(sample.pool_id)
            used[stem] = used.get(stem, 0) + 1
            if used[stem] > 1:
                stem = f"{stem}_{used[stem]}"
            zf.writestr(f"{stem}.png", generate_sample_qr(sample))
    zip_buf.seek(0)
    return zip_buf


# --- Preview ---

def generate_preview(samples: Sequence[SampleRecord]) -> QrPreview:
    """Render the preview image for the first sample of a batch.

    Rendering problems never propagate: the preview is informational only,
    so they come back as an unavailable preview instead.
    """
    if not samples:
        return QrPreview(available=False, reason="No samples selected")

    payload = payload_to_string(encode_payload(samples[0]))
    try:
        data_url = qr_data_url(payload, box_size=8, border=2)
    except (DataOverflowError, ValueError, OSError) as exc:
        logger.debug("QR preview unavailable for %s: %s", samples[0].pool_id, exc)
        return QrPreview(available=False, payload=payload, reason=str(exc) or type(exc).__name__)

    return QrPreview(available=True, data_url=data_url, payload=payload)
