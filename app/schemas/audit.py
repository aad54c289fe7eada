"""Schemas for the admin audit log listing."""

from datetime import datetime
from typing import Any

from app.schemas.base import ApiModel


class AuditLogEntry(ApiModel):
    id: str
    user_id: str | None = None
    username: str | None = None
    action: str
    metadata: dict[str, Any]
    created_at: datetime | None = None


class Pagination(ApiModel):
    limit: int
    offset: int
    total: int


class AuditLogListResponse(ApiModel):
    logs: list[AuditLogEntry]
    pagination: Pagination
