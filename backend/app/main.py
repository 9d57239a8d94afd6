import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import api_router
from app.config import settings
from app.core.deps import get_print_service
from app.core.error_handlers import register_error_handlers
from app.core.middleware import RequestIDMiddleware, SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_print_service().store
    logger.info("%s %s storing print jobs in %s", settings.APP_NAME, settings.APP_VERSION, store.root)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Added last runs first: CORS wraps request ids, which wrap security headers.
app.add_middleware(SecurityHeadersMiddleware, enable_hsts=not settings.DEBUG)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID", "X-Laboratory-ID"],
)

register_error_handlers(app)
app.include_router(api_router)


def _check_storage() -> dict:
    root = get_print_service().store.root
    marker = root / ".health"
    marker.write_text("ok")
    marker.unlink()
    return {"status": "ok", "path": str(root)}


async def _check_broker() -> dict:
    import redis.asyncio as aioredis

    start = time.monotonic()
    r = aioredis.from_url(settings.REDIS_URL, socket_connect_timeout=3)
    try:
        await r.ping()
    finally:
        await r.aclose()
    return {"status": "ok", "latency_ms": round((time.monotonic() - start) * 1000, 1)}


@app.get("/api/health")
async def health_check():
    """Job storage must be writable and the Celery broker reachable."""
    checks: dict = {"version": settings.APP_VERSION}
    healthy = True

    try:
        checks["storage"] = _check_storage()
    except OSError as exc:
        healthy = False
        checks["storage"] = {"status": "error", "detail": str(exc)[:200]}

    try:
        checks["redis"] = await _check_broker()
    except Exception as exc:
        healthy = False
        checks["redis"] = {"status": "error", "detail": str(exc)[:200]}

    checks["status"] = "healthy" if healthy else "degraded"
    return JSONResponse(content=checks, status_code=200 if healthy else 503)
