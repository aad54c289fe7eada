"""Admin app endpoints: list, get, create, patch and deactivate (DELETE)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.api.auth import require_admin
from app.core.database import get_db
from app.core.limiter import admin_limit
from app.schemas.apps import AppCreate, AppOut, AppResponse, AppsListResponse, AppUpdate
from app.schemas.auth import CurrentUser
from app.services import apps as app_service
from app.services.audit import record_audit

router = APIRouter()


@router.get("", response_model=AppsListResponse)
@admin_limit
def list_apps(
    request: Request,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> AppsListResponse:
    """List every app, active or not, newest first."""
    return AppsListResponse(apps=[AppOut.model_validate(a) for a in app_service.list_apps(db)])


@router.get("/{app_id}", response_model=AppResponse)
@admin_limit
def get_app(
    request: Request,
    app_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> AppResponse:
    return AppResponse(app=AppOut.model_validate(app_service.get_app_or_404(db, app_id)))


@router.post("", response_model=AppResponse, status_code=status.HTTP_201_CREATED)
@admin_limit
def create_app(
    request: Request,
    body: AppCreate,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> AppResponse:
    """
    Create an app. internal apps need internalPath, external apps need
    externalUrl; the other routing field is always stored as null. The new
    app is assigned to every admin account.
    """
    app = app_service.create_app_record(db, body)
    result = AppResponse(app=AppOut.model_validate(app))
    record_audit(
        db,
        "app_created",
        user_id=admin.id,
        metadata={"appId": result.app.id, "slug": result.app.slug, "name": result.app.name},
    )
    return result


@router.patch("/{app_id}", response_model=AppResponse)
@admin_limit
def update_app(
    request: Request,
    app_id: str,
    body: AppUpdate,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> AppResponse:
    app, changes = app_service.update_app(db, app_id, body)
    result = AppResponse(app=AppOut.model_validate(app))
    record_audit(db, "app_updated", user_id=admin.id, metadata={"appId": app_id, "changes": changes})
    return result


@router.delete("/{app_id}", response_model=AppResponse)
@admin_limit
def deactivate_app(
    request: Request,
    app_id: str,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> AppResponse:
    """DELETE is a soft delete: the app is deactivated and kept."""
    app = app_service.deactivate_app(db, app_id)
    result = AppResponse(app=AppOut.model_validate(app))
    record_audit(
        db,
        "app_deactivated",
        user_id=admin.id,
        metadata={"appId": app_id, "slug": result.app.slug},
    )
    return result
