"""Schemas for the admin user endpoints."""

from datetime import datetime

from app.models.enums import Role
from app.schemas.base import ApiModel


class UserCreate(ApiModel):
    username: str | None = None
    password: str | None = None
    global_role: Role | None = None
    is_active: bool | None = None
    app_ids: list[str] | None = None


class UserUpdate(ApiModel):
    """Role/active patch; app_ids, when present, replaces the whole assignment set."""

    global_role: Role | None = None
    is_active: bool | None = None
    app_ids: list[str] | None = None


class SetPasswordRequest(ApiModel):
    password: str | None = None


class UserOut(ApiModel):
    id: str
    username: str
    global_role: Role
    is_active: bool


class UserListItem(UserOut):
    """User entry for admin list (no password hash)."""

    created_at: datetime | None = None
    app_count: int
    assigned_app_ids: list[str]


class UserResponse(ApiModel):
    user: UserOut


class UserDetailResponse(ApiModel):
    user: UserListItem


class UsersListResponse(ApiModel):
    users: list[UserListItem]
