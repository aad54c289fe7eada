"""Admin user management: create, patch, password override, deactivate, assignments."""

import logging
from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from app.core.errors import Conflict, NotFound, ValidationFailed
from app.core.security import PASSWORD_MIN_LEN, USERNAME_MAX_LEN, hash_password
from app.models import App, Role, User, UserApp
from app.schemas.users import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def _validate_new_password(password: str | None) -> str:
    if not password or len(password) < PASSWORD_MIN_LEN:
        raise ValidationFailed(f"Password must be at least {PASSWORD_MIN_LEN} characters")
    return password


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.execute(
        select(User).options(selectinload(User.user_apps)).where(User.id == user_id)
    ).scalar_one_or_none()
    if user is None:
        raise NotFound("User not found")
    return user


def list_users(db: Session) -> list[User]:
    """All users, newest first, with assignments loaded."""
    return list(
        db.execute(
            select(User)
            .options(selectinload(User.user_apps))
            .order_by(User.created_at.desc(), User.username)
        )
        .scalars()
        .all()
    )


def _resolve_app_ids(db: Session, app_ids: Iterable[str]) -> list[str]:
    """Deduplicate app ids preserving order; reject ids that match no app."""
    unique_ids = list(dict.fromkeys(app_ids))
    if not unique_ids:
        return []
    found = set(db.execute(select(App.id).where(App.id.in_(unique_ids))).scalars().all())
    missing = [app_id for app_id in unique_ids if app_id not in found]
    if missing:
        raise ValidationFailed(f"Unknown app id(s): {', '.join(missing)}")
    return unique_ids


def create_user(db: Session, body: UserCreate) -> User:
    """Create a user; optional app assignments go in the same transaction."""
    if not body.username or not body.password:
        raise ValidationFailed("Username and password are required")
    if len(body.username) > USERNAME_MAX_LEN:
        raise ValidationFailed(f"Username must be at most {USERNAME_MAX_LEN} characters")
    _validate_new_password(body.password)

    existing = db.execute(select(User.id).where(User.username == body.username)).first()
    if existing is not None:
        raise Conflict("Username already exists")

    app_ids = _resolve_app_ids(db, body.app_ids or [])
    user = User(
        username=body.username,
        password_hash=hash_password(body.password),
        global_role=body.global_role or Role.USER,
        is_active=True if body.is_active is None else body.is_active,
    )
    db.add(user)
    db.flush()
    for app_id in app_ids:
        db.add(UserApp(user_id=user.id, app_id=app_id))
    db.commit()
    db.refresh(user)
    logger.info("User created", extra={"target_user_id": user.id, "username": user.username})
    return user


def replace_assignments(db: Session, user: User, app_ids: Iterable[str]) -> None:
    """
    Make the user's assignment set exactly app_ids. Applied as a diff (remove
    the stale pairs, add the missing ones) inside the caller's transaction.
    """
    wanted = set(_resolve_app_ids(db, app_ids))
    current = {ua.app_id for ua in user.user_apps}
    stale = current - wanted
    if stale:
        db.execute(
            delete(UserApp).where(UserApp.user_id == user.id, UserApp.app_id.in_(stale))
        )
    for app_id in sorted(wanted - current):
        db.add(UserApp(user_id=user.id, app_id=app_id))


def update_user(db: Session, user_id: str, body: UserUpdate) -> tuple[User, dict]:
    """Patch role/active flag and optionally replace assignments. Returns (user, changes)."""
    user = get_user_or_404(db, user_id)
    changes: dict = {}
    if "global_role" in body.model_fields_set and body.global_role is not None:
        user.global_role = body.global_role
        changes["globalRole"] = body.global_role.value
    if "is_active" in body.model_fields_set and body.is_active is not None:
        user.is_active = body.is_active
        changes["isActive"] = body.is_active
    if body.app_ids is not None:
        replace_assignments(db, user, body.app_ids)
        changes["appIds"] = list(dict.fromkeys(body.app_ids))
    db.commit()
    logger.info("User updated", extra={"target_user_id": user.id})
    return get_user_or_404(db, user_id), changes


def set_password(db: Session, user_id: str, password: str | None) -> User:
    """Admin override: no current-password check."""
    _validate_new_password(password)
    user = get_user_or_404(db, user_id)
    user.password_hash = hash_password(password)
    db.commit()
    logger.info("User password set by admin", extra={"target_user_id": user.id})
    return user


def deactivate_user(db: Session, user_id: str) -> User:
    """Soft-deactivate; the account and its assignments are retained."""
    user = get_user_or_404(db, user_id)
    user.is_active = False
    db.commit()
    db.refresh(user)
    logger.info("User deactivated", extra={"target_user_id": user.id})
    return user
