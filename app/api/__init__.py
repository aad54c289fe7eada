"""API routes, mounted under settings.API_PREFIX (/api)."""

from fastapi import APIRouter

from app.api import admin, auth, health, meta, zoho

router = APIRouter()
router.include_router(health.router, tags=["health"])
router.include_router(meta.router, tags=["meta"])
router.include_router(auth.router, tags=["auth"])
router.include_router(admin.router, prefix="/admin")
router.include_router(zoho.router, prefix="/zoho", tags=["zoho"])
