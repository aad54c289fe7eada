"""Admin app management: create, patch, deactivate and admin auto-assignment."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import Conflict, NotFound, ValidationFailed
from app.core.icons import ALLOWED_ICON_KEYS, normalize_icon_key
from app.models import App, AppType, Role, User, UserApp
from app.schemas.apps import AppCreate, AppUpdate

logger = logging.getLogger(__name__)

DEFAULT_APP_VERSION = "1.0.0"

INVALID_ICON_MESSAGE = f"Invalid iconKey. Allowed values: {', '.join(ALLOWED_ICON_KEYS)}"


def _resolve_icon(body: AppCreate | AppUpdate) -> tuple[bool, str | None]:
    """
    Return (supplied, icon). iconKey wins over the legacy icon field. An icon
    that was supplied but does not normalize is a validation error; one that
    was not supplied passes through as unset.
    """
    supplied = "icon_key" in body.model_fields_set or "icon" in body.model_fields_set
    if not supplied:
        return False, None
    raw = body.icon_key if body.icon_key is not None else body.icon
    icon = normalize_icon_key(raw)
    if icon is None:
        raise ValidationFailed(INVALID_ICON_MESSAGE)
    return True, icon


def _slug_taken(db: Session, slug: str) -> bool:
    return db.execute(select(App.id).where(App.slug == slug)).first() is not None


def get_app_or_404(db: Session, app_id: str) -> App:
    app = db.get(App, app_id)
    if app is None:
        raise NotFound("App not found")
    return app


def list_apps(db: Session) -> list[App]:
    return list(
        db.execute(select(App).order_by(App.created_at.desc(), App.slug)).scalars().all()
    )


def assign_app_to_admins(db: Session, app: App) -> int:
    """
    Assign app to every admin account, skipping pairs that already exist.
    Best-effort: a failure is logged and the app stays created. Returns rows added.
    """
    try:
        admin_ids = db.execute(select(User.id).where(User.global_role == Role.ADMIN)).scalars().all()
        assigned = set(
            db.execute(select(UserApp.user_id).where(UserApp.app_id == app.id)).scalars().all()
        )
        added = 0
        for user_id in admin_ids:
            if user_id in assigned:
                continue
            db.add(UserApp(user_id=user_id, app_id=app.id))
            added += 1
        db.commit()
        return added
    except SQLAlchemyError:
        db.rollback()
        logger.warning(
            "Auto-assigning app to admins failed",
            exc_info=True,
            extra={"app_id": app.id},
        )
        return 0


def create_app_record(db: Session, body: AppCreate) -> App:
    """Validate and persist a new app, then auto-assign it to all admins."""
    if not body.name or not body.slug or body.type is None:
        raise ValidationFailed("Name, slug, and type are required")
    if body.type == AppType.INTERNAL and not body.internal_path:
        raise ValidationFailed("Internal path is required for internal apps")
    if body.type == AppType.EXTERNAL and not body.external_url:
        raise ValidationFailed("External URL is required for external apps")
    _, icon = _resolve_icon(body)
    if _slug_taken(db, body.slug):
        raise Conflict("Slug already exists")

    app = App(
        name=body.name,
        slug=body.slug,
        type=body.type,
        internal_path=body.internal_path if body.type == AppType.INTERNAL else None,
        external_url=body.external_url if body.type == AppType.EXTERNAL else None,
        icon=icon,
        version=body.version or DEFAULT_APP_VERSION,
        is_active=True if body.is_active is None else body.is_active,
    )
    db.add(app)
    db.commit()
    db.refresh(app)
    added = assign_app_to_admins(db, app)
    logger.info("App created", extra={"app_id": app.id, "slug": app.slug, "admins_assigned": added})
    return app


def update_app(db: Session, app_id: str, body: AppUpdate) -> tuple[App, dict[str, Any]]:
    """
    Partial update. A type change switches the routing field and clears the
    other one; without a type change a supplied path/URL only updates the
    field that matches the current type. Returns (app, applied changes).
    """
    app = get_app_or_404(db, app_id)
    fields = body.model_fields_set

    if body.slug and body.slug != app.slug and _slug_taken(db, body.slug):
        raise Conflict("Slug already exists")
    if "name" in fields and not body.name:
        raise ValidationFailed("Name cannot be empty")
    if "slug" in fields and not body.slug:
        raise ValidationFailed("Slug cannot be empty")
    icon_supplied, icon = _resolve_icon(body)

    changes: dict[str, Any] = {}
    if body.name:
        changes["name"] = body.name
    if body.slug:
        changes["slug"] = body.slug
    if icon_supplied:
        changes["icon"] = icon
    if "version" in fields and body.version is not None:
        changes["version"] = body.version
    if "is_active" in fields and body.is_active is not None:
        changes["isActive"] = body.is_active

    new_type = body.type if body.type is not None else app.type
    internal_path = app.internal_path
    external_url = app.external_url
    if body.type == AppType.INTERNAL:
        if "internal_path" in fields:
            internal_path = body.internal_path
        external_url = None
    elif body.type == AppType.EXTERNAL:
        if "external_url" in fields:
            external_url = body.external_url
        internal_path = None
    elif app.type == AppType.INTERNAL and "internal_path" in fields:
        internal_path = body.internal_path
    elif app.type == AppType.EXTERNAL and "external_url" in fields:
        external_url = body.external_url

    if new_type == AppType.INTERNAL and not internal_path:
        raise ValidationFailed("Internal path is required for internal apps")
    if new_type == AppType.EXTERNAL and not external_url:
        raise ValidationFailed("External URL is required for external apps")

    if new_type != app.type:
        changes["type"] = new_type.value
    if internal_path != app.internal_path:
        changes["internalPath"] = internal_path
    if external_url != app.external_url:
        changes["externalUrl"] = external_url

    app.type = new_type
    app.internal_path = internal_path
    app.external_url = external_url
    if "name" in changes:
        app.name = changes["name"]
    if "slug" in changes:
        app.slug = changes["slug"]
    if icon_supplied:
        app.icon = icon
    if "version" in changes:
        app.version = changes["version"]
    if "isActive" in changes:
        app.is_active = changes["isActive"]

    db.commit()
    db.refresh(app)
    logger.info("App updated", extra={"app_id": app.id})
    return app, changes


def deactivate_app(db: Session, app_id: str) -> App:
    """Soft delete: is_active=False, the record and its assignments are kept."""
    app = get_app_or_404(db, app_id)
    app.is_active = False
    db.commit()
    db.refresh(app)
    logger.info("App deactivated", extra={"app_id": app.id, "slug": app.slug})
    return app
