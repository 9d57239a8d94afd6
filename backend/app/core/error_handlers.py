"""Exception handlers that turn every failure into the JSON error envelope.

    {"success": false, "message": "...", "error": {"code", "message", "details"?}}

Render errors and tracebacks stay in the log unless DEBUG is on.
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.services.mobile_print import PrintJobError

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Invalid print job data. Check the details for specific field errors."


def error_body(code: str, message: str, details: list | None = None) -> dict:
    error: dict = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "message": message, "error": error}


def _respond(status_code: int, code: str, message: str, details: list | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(code, message, details))


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _respond(exc.status_code, f"HTTP_{exc.status_code}", message)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """One ``{field, message, type}`` entry per failed field."""
    details = [
        {
            "field": " -> ".join(str(part) for part in err.get("loc", [])),
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type", "value_error"),
        }
        for err in exc.errors()
    ]
    return _respond(
        status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR", VALIDATION_MESSAGE, details
    )


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    return _respond(status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", str(exc))


async def handle_print_job_error(request: Request, exc: PrintJobError) -> JSONResponse:
    logger.error("Print job error on %s %s: %s", request.method, request.url.path, exc)
    return _respond(status.HTTP_500_INTERNAL_SERVER_ERROR, "PRINT_JOB_FAILED", str(exc))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    message = (
        f"Internal error: {exc}"
        if settings.DEBUG
        else "An unexpected error occurred. Please try again later."
    )
    return _respond(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", message)


HANDLERS = (
    (StarletteHTTPException, handle_http_error),
    (RequestValidationError, handle_validation_error),
    (ValueError, handle_value_error),
    (PrintJobError, handle_print_job_error),
    (Exception, handle_unexpected_error),
)


def register_error_handlers(app: FastAPI) -> None:
    for exc_class, handler in HANDLERS:
        app.add_exception_handler(exc_class, handler)
