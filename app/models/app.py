"""ORM model for launchable apps."""

from sqlalchemy import Boolean, Column, DateTime, Enum, String, func
from sqlalchemy.orm import relationship

from app.models.base import Base, new_id, utcnow
from app.models.enums import AppType


class App(Base):
    """
    Launchable app. type decides which routing field is populated:
    internal -> internal_path, external -> external_url; the other is NULL.
    Deactivated (is_active=False) instead of deleted.
    """

    __tablename__ = "apps"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    type = Column(
        Enum(
            AppType,
            name="app_type",
            native_enum=False,
            values_callable=lambda enum_cls: [m.value for m in enum_cls],
        ),
        nullable=False,
    )
    internal_path = Column(String(1024), nullable=True)
    external_url = Column(String(2048), nullable=True)
    icon = Column(String(64), nullable=True)
    version = Column(String(64), nullable=False, default="1.0.0")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )

    user_apps = relationship("UserApp", back_populates="app", cascade="all, delete-orphan")
