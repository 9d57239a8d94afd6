"""QR code generation, preview, and scan validation endpoints."""

from fastapi import APIRouter
from fastapi.responses import Response, StreamingResponse

from app.core.sanitize import sanitize_filename
from app.schemas.print_job import SampleRecord
from app.schemas.qr import QrBatchRequest, QrValidateRequest, QrValidateResponse
from app.services.qr_code import (
    QrDecodeError,
    decode_payload,
    generate_batch_qr,
    generate_preview,
    generate_sample_qr,
)

router = APIRouter(prefix="/qr-codes", tags=["qr-codes"])


@router.post("/generate")
def generate_qr(sample: SampleRecord):
    """Generate a captioned QR code PNG for one sample."""
    png_bytes = generate_sample_qr(sample)
    filename = sanitize_filename(sample.pool_id)
    return Response(
        content=png_bytes,
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="{filename}.png"'},
    )


@router.post("/generate-batch")
def generate_qr_batch(data: QrBatchRequest):
    """Generate QR codes for multiple samples, returned as a ZIP file."""
    zip_buf = generate_batch_qr(data.samples)
    return StreamingResponse(
        zip_buf,
        media_type="application/zip",
        headers={"Content-Disposition": 'attachment; filename="qr_codes.zip"'},
    )


@router.post("/preview")
def preview_qr(data: QrBatchRequest):
    """Preview image for the first sample of a batch."""
    preview = generate_preview(data.samples)
    return {"success": True, "data": preview.model_dump(mode="json", by_alias=True)}


@router.post("/validate")
def validate_qr(body: QrValidateRequest):
    """Check that a scanned string is a sample label and decode it."""
    try:
        sample = decode_payload(body.qr_data)
    except QrDecodeError as exc:
        result = QrValidateResponse(valid=False, error=str(exc))
    else:
        result = QrValidateResponse(valid=True, data=sample)
    return {"success": True, "data": result.model_dump(mode="json", by_alias=True, exclude_none=True)}
