"""Pydantic request/response schemas."""

from app.schemas.apps import AppCreate, AppOut, AppResponse, AppsListResponse, AppUpdate
from app.schemas.audit import AuditLogEntry, AuditLogListResponse, Pagination
from app.schemas.auth import (
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    LoginResponse,
    MeResponse,
    TokenClaims,
)
from app.schemas.base import MessageResponse
from app.schemas.health import HealthResponse, ProbeResult, VersionResponse
from app.schemas.users import (
    SetPasswordRequest,
    UserCreate,
    UserDetailResponse,
    UserListItem,
    UserResponse,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "AppCreate",
    "AppOut",
    "AppResponse",
    "AppUpdate",
    "AppsListResponse",
    "AuditLogEntry",
    "AuditLogListResponse",
    "ChangePasswordRequest",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "MessageResponse",
    "Pagination",
    "ProbeResult",
    "SetPasswordRequest",
    "TokenClaims",
    "UserCreate",
    "UserDetailResponse",
    "UserListItem",
    "UserResponse",
    "UserUpdate",
    "UsersListResponse",
    "VersionResponse",
]
