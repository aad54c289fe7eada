"""Admin audit log listing (paginated, newest first)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.api.auth import require_admin
from app.core.database import get_db
from app.core.limiter import admin_limit
from app.schemas.audit import AuditLogEntry, AuditLogListResponse, Pagination
from app.schemas.auth import CurrentUser
from app.services.audit import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, list_audit_logs

router = APIRouter()


@router.get("", response_model=AuditLogListResponse)
@admin_limit
def get_audit_logs(
    request: Request,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_LIMIT)] = DEFAULT_PAGE_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> AuditLogListResponse:
    logs, total = list_audit_logs(db, limit=limit, offset=offset)
    return AuditLogListResponse(
        logs=[
            AuditLogEntry(
                id=log.id,
                user_id=log.user_id,
                username=log.user.username if log.user is not None else None,
                action=log.action,
                metadata=log.metadata_ or {},
                created_at=log.created_at,
            )
            for log in logs
        ],
        pagination=Pagination(limit=limit, offset=offset, total=total),
    )
