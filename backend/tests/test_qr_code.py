"""
Unit tests for the QR payload encoder and QR image generation.
"""

import io
import json
import zipfile
from unittest.mock import patch

import pytest
from qrcode.exceptions import DataOverflowError

from app.schemas.print_job import SampleRecord
from app.services.qr_code import (
    QrDecodeError,
    decode_payload,
    encode_payload,
    generate_batch_qr,
    generate_preview,
    generate_qr_png,
    generate_sample_qr,
    payload_to_string,
    qr_data_url,
)
from helpers import make_sample

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


# ============================================================
# Payload encoding
# ============================================================

def test_encode_full_sample():
    """Every collection field is carried under its short key."""
    payload = json.loads(payload_to_string(encode_payload(make_sample())))

    assert payload == {
        "v": "1.0",
        "t": "WNV_SAMPLE",
        "p": "POOL-001",
        "tr": "TRAP-07",
        "cd": "2024-07-15",
        "lab": "LAB-AZ",
        "lat": 33.45,
        "lng": -112.07,
        "sp": "Culex_tarsalis",
        "cb": "J. Ortiz",
    }


def test_encode_mandatory_only_sample_omits_optional_keys():
    """A sample with only the required fields encodes without optional keys."""
    sample = SampleRecord(pool_id="P1", laboratory_id="L1")
    payload = json.loads(payload_to_string(encode_payload(sample)))

    assert payload == {"v": "1.0", "t": "WNV_SAMPLE", "p": "P1", "lab": "L1"}


def test_payload_string_is_compact_and_deterministic():
    """No whitespace, no timestamp: the same sample always encodes identically."""
    sample = make_sample()
    first = payload_to_string(encode_payload(sample))
    second = payload_to_string(encode_payload(sample))

    assert first == second
    assert " " not in first.replace("J. Ortiz", "")


def test_iso_timestamp_truncated_to_date():
    """Collection timestamps from field apps keep only the day."""
    sample = SampleRecord.model_validate(
        {"poolId": "P1", "laboratoryId": "L1", "collectionDate": "2024-07-15T08:30:00Z"}
    )
    assert encode_payload(sample).cd == "2024-07-15"


# ============================================================
# Payload decoding
# ============================================================

def test_decode_restores_sample():
    """A scanned label decodes to the sample it was printed for."""
    sample = make_sample()
    decoded = decode_payload(payload_to_string(encode_payload(sample)))
    assert decoded.model_dump() == sample.model_dump()


@pytest.mark.parametrize(
    "text, message",
    [
        ("not json", "Invalid JSON format"),
        ("[1, 2]", "Invalid QR code format"),
        ('{"v":"2.0","t":"WNV_SAMPLE","p":"P","tr":"T","cd":"2024-01-01","lab":"L"}',
         "Invalid QR code format"),
        ('{"v":"1.0","t":"OTHER","p":"P","tr":"T","cd":"2024-01-01","lab":"L"}',
         "Invalid QR code format"),
        ('{"v":"1.0","t":"WNV_SAMPLE","p":"P","cd":"2024-01-01","lab":"L"}',
         "Missing required sample data"),
    ],
)
def test_decode_rejects(text, message):
    with pytest.raises(QrDecodeError, match=message):
        decode_payload(text)


# ============================================================
# Images
# ============================================================

def test_generate_qr_png():
    assert generate_qr_png("hello").startswith(PNG_MAGIC)


def test_qr_data_url():
    assert qr_data_url("hello").startswith("data:image/png;base64,")


def test_generate_sample_qr_is_png():
    assert generate_sample_qr(make_sample()).startswith(PNG_MAGIC)


def test_batch_zip_has_one_png_per_sample_with_unique_names():
    """Duplicate or unsafe pool ids still produce distinct, safe entry names."""
    samples = [make_sample("POOL-1"), make_sample("POOL-1"), make_sample("../etc/POOL-2")]
    buf = generate_batch_qr(samples)

    with zipfile.ZipFile(io.BytesIO(buf.read())) as zf:
        names = zf.namelist()
        assert names == ["POOL-1.png", "POOL-1_2.png", "POOL-2.png"]
        assert zf.read("POOL-2.png").startswith(PNG_MAGIC)


# ============================================================
# Preview
# ============================================================

def test_preview_uses_first_sample_only():
    samples = [make_sample("FIRST"), make_sample("SECOND")]
    preview = generate_preview(samples)

    assert preview.available is True
    assert preview.data_url.startswith("data:image/png;base64,")
    assert json.loads(preview.payload)["p"] == "FIRST"


def test_preview_empty_selection():
    preview = generate_preview([])
    assert preview.available is False
    assert preview.reason == "No samples selected"


def test_preview_render_failure_is_reported_not_raised():
    """A renderer failure yields an unavailable preview instead of an exception."""
    with patch("app.services.qr_code.qr_data_url", side_effect=DataOverflowError("too big")):
        preview = generate_preview([make_sample()])

    assert preview.available is False
    assert preview.data_url is None
    assert preview.reason == "too big"
    assert json.loads(preview.payload)["p"] == "POOL-001"
