"""Best-effort audit trail writes and the paginated admin listing."""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.models import AuditLog

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 100
MAX_PAGE_LIMIT = 500


def record_audit(
    db: Session,
    action: str,
    user_id: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    """
    Append one audit entry and commit. Fire-and-forget: a failed write is rolled
    back and logged, never raised to the caller and never retried. Call only
    after the primary operation has committed.
    """
    try:
        db.add(AuditLog(user_id=user_id, action=action, metadata_=metadata or {}))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Audit log write failed",
            extra={"audit_action": action, "audit_user_id": user_id},
        )


def list_audit_logs(db: Session, limit: int, offset: int) -> tuple[list[AuditLog], int]:
    """Newest-first page of audit entries plus the total row count."""
    logs = (
        db.execute(
            select(AuditLog)
            .options(joinedload(AuditLog.user))
            .order_by(AuditLog.created_at.desc(), AuditLog.id)
            .limit(limit)
            .offset(offset)
        )
        .scalars()
        .all()
    )
    total = db.execute(select(func.count()).select_from(AuditLog)).scalar_one()
    return list(logs), total
