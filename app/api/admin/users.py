"""Admin user endpoints: list, get, create, patch, set password, deactivate."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.api.auth import require_admin
from app.core.database import get_db
from app.core.limiter import admin_limit
from app.models import User
from app.schemas.auth import CurrentUser
from app.schemas.base import MessageResponse
from app.schemas.users import (
    SetPasswordRequest,
    UserCreate,
    UserDetailResponse,
    UserListItem,
    UserOut,
    UserResponse,
    UsersListResponse,
    UserUpdate,
)
from app.services import users as user_service
from app.services.audit import record_audit

router = APIRouter()


def _list_item(user: User) -> UserListItem:
    app_ids = sorted(ua.app_id for ua in user.user_apps)
    return UserListItem(
        id=user.id,
        username=user.username,
        global_role=user.global_role,
        is_active=user.is_active,
        created_at=user.created_at,
        app_count=len(app_ids),
        assigned_app_ids=app_ids,
    )


@router.get("", response_model=UsersListResponse)
@admin_limit
def list_users(
    request: Request,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users, newest first, with their assigned app ids."""
    return UsersListResponse(users=[_list_item(u) for u in user_service.list_users(db)])


@router.get("/{user_id}", response_model=UserDetailResponse)
@admin_limit
def get_user(
    request: Request,
    user_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserDetailResponse:
    return UserDetailResponse(user=_list_item(user_service.get_user_or_404(db, user_id)))


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@admin_limit
def create_user(
    request: Request,
    body: UserCreate,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Create a user; role defaults to user, optional appIds are assigned."""
    user = user_service.create_user(db, body)
    result = UserResponse(user=UserOut.model_validate(user))
    record_audit(
        db,
        "user_created",
        user_id=admin.id,
        metadata={"targetUserId": result.user.id, "username": result.user.username},
    )
    return result


@router.patch("/{user_id}", response_model=UserResponse)
@admin_limit
def update_user(
    request: Request,
    user_id: str,
    body: UserUpdate,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Patch role/active flag; appIds replaces the full assignment set."""
    user, changes = user_service.update_user(db, user_id, body)
    result = UserResponse(user=UserOut.model_validate(user))
    record_audit(
        db,
        "user_updated",
        user_id=admin.id,
        metadata={"targetUserId": user_id, "changes": changes},
    )
    return result


@router.post("/{user_id}/password", response_model=MessageResponse)
@admin_limit
def set_user_password(
    request: Request,
    user_id: str,
    body: SetPasswordRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Admin override: set a user's password without the current one."""
    user_service.set_password(db, user_id, body.password)
    record_audit(db, "user_password_set", user_id=admin.id, metadata={"targetUserId": user_id})
    return MessageResponse(message="Password set successfully")


@router.delete("/{user_id}", response_model=UserResponse)
@admin_limit
def deactivate_user(
    request: Request,
    user_id: str,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Deactivate (not delete) a user; existing sessions stop working immediately."""
    user = user_service.deactivate_user(db, user_id)
    result = UserResponse(user=UserOut.model_validate(user))
    record_audit(db, "user_deactivated", user_id=admin.id, metadata={"targetUserId": user_id})
    return result
