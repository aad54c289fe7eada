"""Request/response schemas for session and self-service auth endpoints."""

from pydantic import BaseModel, Field

from app.models.enums import Role
from app.schemas.apps import AppOut
from app.schemas.base import ApiModel


class TokenClaims(BaseModel):
    """Claim set embedded in the session JWT (iat/exp are added on signing)."""

    user_id: str
    username: str
    global_role: Role
    assigned_apps: list[str] = Field(
        default_factory=list,
        description="Slugs of active apps assigned at login; a snapshot, not live state.",
    )


class CurrentUser(BaseModel):
    """Authenticated identity attached to the request by the session dependency."""

    id: str
    username: str
    role: Role
    assigned_apps: list[str] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class LoginRequest(ApiModel):
    """Credentials for login. Presence is checked by the handler to return 400, not 422."""

    username: str | None = None
    password: str | None = None


class ChangePasswordRequest(ApiModel):
    current_password: str | None = None
    new_password: str | None = None


class LoginUser(ApiModel):
    id: str
    username: str
    global_role: Role
    assigned_apps: list[str]


class LoginResponse(ApiModel):
    user: LoginUser


class MeUser(ApiModel):
    id: str
    username: str
    global_role: Role
    is_active: bool
    apps: list[AppOut]


class MeResponse(ApiModel):
    """Response for GET /me: live profile plus active assigned apps."""

    user: MeUser
