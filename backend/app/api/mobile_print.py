"""Mobile print job endpoints: create, inspect, download, email, printers."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import FileResponse

from app.core.deps import get_laboratory_id, get_print_service
from app.core.middleware import LABEL_DOCUMENT_CSP
from app.core.sanitize import is_job_filename
from app.schemas.print_job import EmailToPrinterRequest, PrintJobRequest
from app.services.mobile_print import DEFAULT_EMAIL_SUBJECT, MobilePrintService, PrintJobError

router = APIRouter(prefix="/mobile-print", tags=["mobile-print"])

PrintService = Annotated[MobilePrintService, Depends(get_print_service)]


@router.post("/create-job", status_code=status.HTTP_201_CREATED)
def create_print_job(
    body: PrintJobRequest,
    svc: PrintService,
    laboratory_id: Annotated[str, Depends(get_laboratory_id)],
):
    """Render a label document for the given samples and store the job."""
    job = svc.create_job(body, laboratory_id)
    return {
        "success": True,
        "data": {
            "printJob": job.model_dump(mode="json", by_alias=True),
            "message": f"Mobile print job created for {len(body.qr_codes)} labels",
        },
    }


@router.get("/job/{job_id}")
def get_print_job(job_id: str, svc: PrintService):
    """Get a print job's status."""
    job = svc.get_job(job_id)
    if job is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Mobile print job not found")
    return {"success": True, "data": job.model_dump(mode="json", by_alias=True)}


@router.get("/jobs")
def list_print_jobs(svc: PrintService, limit: int = Query(10, ge=1, le=100)):
    """Most recent print jobs, newest first."""
    return {
        "success": True,
        "data": [j.model_dump(mode="json", by_alias=True) for j in svc.recent_jobs(limit)],
    }


@router.get("/download/{filename}")
def download_print_file(filename: str, svc: PrintService):
    """Serve a job's label document.

    ``<id>.html`` is shown inline; append ``?autoprint=1`` to open the print
    dialog once it has loaded. ``<id>.pdf`` is rendered on first request.
    """
    if not is_job_filename(filename):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Invalid filename")

    job_id, _, ext = filename.rpartition(".")
    try:
        path = svc.get_document(job_id, f".{ext}")
    except LookupError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "File not found")

    if ext == "html":
        return FileResponse(
            path,
            media_type="text/html",
            headers={
                "Content-Disposition": f'inline; filename="{filename}"',
                "Content-Security-Policy": LABEL_DOCUMENT_CSP,
            },
        )
    return FileResponse(
        path,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/email-to-printer")
def email_to_printer(body: EmailToPrinterRequest, svc: PrintService, response: Response):
    """Email a print job's PDF to a printer's email-to-print address.

    With ``deferred: true`` the email is queued on Celery and the call
    returns 202 immediately.
    """
    if svc.get_job(body.job_id) is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Print job not found")

    if body.deferred:
        from app.tasks.print_jobs import email_print_job

        email_print_job.delay(body.job_id, body.email, body.subject)
        response.status_code = status.HTTP_202_ACCEPTED
        message = f"Print job queued for {body.email}"
    else:
        try:
            svc.email_job(body.job_id, body.email, body.subject)
        except LookupError:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Print job not found")
        except PrintJobError as exc:
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, str(exc))
        message = f"Print job emailed to {body.email}"

    return {
        "success": True,
        "message": message,
        "data": {
            "jobId": body.job_id,
            "email": body.email,
            "subject": body.subject or DEFAULT_EMAIL_SUBJECT,
        },
    }


@router.get("/printers")
def list_printers(svc: PrintService):
    """Printers reachable from a mobile device."""
    return {
        "success": True,
        "data": [p.model_dump(mode="json", by_alias=True) for p in svc.available_printers()],
    }


@router.post("/test-printer/{printer_id}")
def test_printer(printer_id: str, svc: PrintService):
    result = svc.test_printer(printer_id)
    return {"success": True, "data": result.model_dump(mode="json", by_alias=True)}


@router.get("/formats")
def list_formats(svc: PrintService):
    """Print formats, delivery methods, and label sizes."""
    return {"success": True, "data": svc.catalog()}
