"""ORM models for user accounts and their app assignments."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    String,
    func,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, new_id, utcnow
from app.models.enums import Role


class User(Base):
    """
    Portal user account. Never physically deleted: deactivation (is_active=False)
    is the terminal state. username is immutable after creation.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    global_role = Column(
        Enum(
            Role,
            name="global_role",
            native_enum=False,
            values_callable=lambda enum_cls: [m.value for m in enum_cls],
        ),
        nullable=False,
        default=Role.USER,
    )
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

    user_apps = relationship(
        "UserApp",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class UserApp(Base):
    """Assignment of an app to a user; one row per (user, app) pair."""

    __tablename__ = "user_apps"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    app_id = Column(String(36), ForeignKey("apps.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    user = relationship("User", back_populates="user_apps")
    app = relationship("App", back_populates="user_apps")
