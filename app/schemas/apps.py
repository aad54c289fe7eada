"""Schemas for app records and the admin app endpoints."""

from datetime import datetime

from pydantic import computed_field

from app.core.icons import normalize_icon_key
from app.models.enums import AppType
from app.schemas.base import ApiModel


class AppOut(ApiModel):
    """App as returned by the API; iconKey is the normalized form of icon."""

    id: str
    name: str
    slug: str
    type: AppType
    internal_path: str | None = None
    external_url: str | None = None
    icon: str | None = None
    version: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @computed_field(alias="iconKey")
    @property
    def icon_key(self) -> str | None:
        return normalize_icon_key(self.icon)


class AppCreate(ApiModel):
    """
    Body for POST /admin/apps. Required fields are checked by the service so
    the client gets VALIDATION_ERROR messages naming the missing field.
    """

    name: str | None = None
    slug: str | None = None
    type: AppType | None = None
    internal_path: str | None = None
    external_url: str | None = None
    icon_key: str | None = None
    icon: str | None = None
    version: str | None = None
    is_active: bool | None = None


class AppUpdate(ApiModel):
    """Body for PATCH /admin/apps/{id}; only supplied fields are applied."""

    name: str | None = None
    slug: str | None = None
    type: AppType | None = None
    internal_path: str | None = None
    external_url: str | None = None
    icon_key: str | None = None
    icon: str | None = None
    version: str | None = None
    is_active: bool | None = None


class AppResponse(ApiModel):
    app: AppOut


class AppsListResponse(ApiModel):
    apps: list[AppOut]
