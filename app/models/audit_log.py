"""ORM model for the append-only audit trail."""

from sqlalchemy import Column, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship

from app.models.base import Base, JSONType, new_id, utcnow


class AuditLog(Base):
    """
    One recorded action. user_id is NULL for system-attributed events.
    Rows are never updated or deleted.
    """

    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action = Column(String(255), nullable=False, index=True)
    # "metadata" is reserved on declarative classes; the column keeps the name.
    metadata_ = Column("metadata", JSONType, nullable=False, default=dict)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )

    user = relationship("User")
