"""Cookie session login/logout, self-service endpoints and the auth dependencies (get_current_user, require_admin)."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import ColumnElement, select
from sqlalchemy.orm import Session, selectinload

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import Forbidden, NotFound, Unauthorized, ValidationFailed
from app.core.limiter import limiter
from app.core.security import (
    PASSWORD_MIN_LEN,
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from app.models import User, UserApp
from app.schemas.apps import AppOut
from app.schemas.auth import (
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    LoginResponse,
    LoginUser,
    MeResponse,
    MeUser,
    TokenClaims,
)
from app.schemas.base import MessageResponse
from app.services.audit import record_audit

logger = logging.getLogger(__name__)
router = APIRouter()

# One message for unknown user, inactive user and wrong password (no enumeration signal).
INVALID_CREDENTIALS = "Invalid credentials"


def _load_user_with_apps(db: Session, criterion: ColumnElement[bool]) -> User | None:
    stmt = (
        select(User)
        .options(selectinload(User.user_apps).joinedload(UserApp.app))
        .where(criterion)
    )
    return db.execute(stmt).scalar_one_or_none()


def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=settings.session_max_age_seconds,
        path="/",
        domain=settings.COOKIE_DOMAIN,
        secure=settings.COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def _clear_session_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value="",
        max_age=0,
        expires=datetime(1970, 1, 1, tzinfo=UTC),
        path="/",
        domain=settings.COOKIE_DOMAIN,
        secure=settings.COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def get_current_user(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CurrentUser:
    """
    Dependency: require a valid session cookie whose user still exists and is active.
    The active check runs on every request so deactivation takes effect before the
    token expires. The role comes from the live record, not the token.
    """
    token = request.cookies.get(settings.COOKIE_NAME)
    if not token:
        raise Unauthorized("Authentication required")
    try:
        claims = decode_access_token(token, settings)
    except InvalidTokenError as e:
        logger.warning("Authentication failed", extra={"reason": str(e)})
        raise Unauthorized("Invalid or expired token") from e
    user = db.get(User, claims.user_id)
    if user is None or not user.is_active:
        raise Unauthorized("User not found or inactive")
    current = CurrentUser(
        id=user.id,
        username=user.username,
        role=user.global_role,
        assigned_apps=claims.assigned_apps,
    )
    request.state.user = current
    return current


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if not current_user.is_admin:
        raise Forbidden("Admin access required")
    return current_user


@router.post("/login", response_model=LoginResponse)
@limiter.limit(get_settings().LOGIN_RATE_LIMIT)
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> LoginResponse:
    """
    Authenticate with username and password and set the session cookie.
    Returns the profile and the slugs of the active apps assigned to the user.
    """
    if not body.username or not body.password:
        raise ValidationFailed("Username and password are required")

    user = _load_user_with_apps(db, User.username == body.username)
    if user is None or not user.is_active:
        # Same bcrypt cost as a real check so timing does not reveal the account.
        verify_password(body.password, dummy_password_hash())
        logger.warning(
            "Login attempt failed: user not found or inactive",
            extra={"username": body.username},
        )
        raise Unauthorized(INVALID_CREDENTIALS)

    if not verify_password(body.password, user.password_hash):
        logger.warning(
            "Login attempt failed: invalid password",
            extra={"user_id": user.id, "username": body.username},
        )
        record_audit(db, "login_failed", user_id=user.id, metadata={"username": body.username})
        raise Unauthorized(INVALID_CREDENTIALS)

    assigned_apps = sorted(ua.app.slug for ua in user.user_apps if ua.app.is_active)
    claims = TokenClaims(
        user_id=user.id,
        username=user.username,
        global_role=user.global_role,
        assigned_apps=assigned_apps,
    )
    result = LoginResponse(
        user=LoginUser(
            id=user.id,
            username=user.username,
            global_role=user.global_role,
            assigned_apps=assigned_apps,
        )
    )
    _set_session_cookie(response, create_access_token(claims, settings), settings)
    response.headers["Cache-Control"] = "no-store"

    logger.info("User logged in", extra={"user_id": claims.user_id, "username": claims.username})
    record_audit(db, "login_success", user_id=claims.user_id, metadata={"username": claims.username})
    return result


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """Expire the session cookie."""
    _clear_session_cookie(response, settings)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=MeResponse)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MeResponse:
    """Live profile; apps are re-read from the database, not taken from the token."""
    user = _load_user_with_apps(db, User.id == current_user.id)
    if user is None:
        raise NotFound("User not found")
    apps = sorted(
        (ua.app for ua in user.user_apps if ua.app.is_active),
        key=lambda app: app.name.lower(),
    )
    return MeResponse(
        user=MeUser(
            id=user.id,
            username=user.username,
            global_role=user.global_role,
            is_active=user.is_active,
            apps=[AppOut.model_validate(app) for app in apps],
        )
    )


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Change own password; the current password must be confirmed."""
    if not body.current_password or not body.new_password:
        raise ValidationFailed("Current password and new password are required")
    if len(body.new_password) < PASSWORD_MIN_LEN:
        raise ValidationFailed(f"New password must be at least {PASSWORD_MIN_LEN} characters")

    user = db.get(User, current_user.id)
    if user is None:
        raise NotFound("User not found")
    if not verify_password(body.current_password, user.password_hash):
        raise Unauthorized("Current password is incorrect")

    user.password_hash = hash_password(body.new_password)
    db.commit()
    logger.info("Password changed", extra={"user_id": current_user.id})
    record_audit(db, "password_changed", user_id=current_user.id, metadata={})
    return MessageResponse(message="Password changed successfully")

