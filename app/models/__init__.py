"""SQLAlchemy ORM models."""

from app.models.app import App
from app.models.audit_log import AuditLog
from app.models.base import Base
from app.models.enums import AppType, Role
from app.models.user import User, UserApp

__all__ = ["App", "AppType", "AuditLog", "Base", "Role", "User", "UserApp"]
