"""API router that aggregates all sub-routers."""

from fastapi import APIRouter

from app.api.mobile_print import router as mobile_print_router
from app.api.qr import router as qr_router

api_router = APIRouter(prefix="/api")
api_router.include_router(mobile_print_router)
api_router.include_router(qr_router)
