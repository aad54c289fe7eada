"""Admin-only routes; every endpoint shares the admin rate-limit bucket."""

from fastapi import APIRouter

from app.api.admin import apps, audit, users

router = APIRouter()
router.include_router(users.router, prefix="/users", tags=["admin-users"])
router.include_router(apps.router, prefix="/apps", tags=["admin-apps"])
router.include_router(audit.router, prefix="/audit", tags=["admin-audit"])
