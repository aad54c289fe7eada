"""
Bootstrap an empty database: admin account, sample apps, assignments.
Run once after migrations:
  ADMIN_PASSWORD=... python -m app.scripts.seed
Does nothing when any user already exists.
"""

import logging
import sys
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import SessionLocal
from app.core.logging_config import configure_logging
from app.core.security import hash_password
from app.models import App, AppType, AuditLog, Role, User, UserApp

logger = logging.getLogger(__name__)

SAMPLE_APPS = (
    {
        "name": "Trade Show",
        "slug": "trade-show",
        "type": AppType.INTERNAL,
        "internal_path": "/apps/trade-show",
        "icon": "shop",
    },
    {
        "name": "Tablets",
        "slug": "tablets",
        "type": AppType.INTERNAL,
        "internal_path": "/apps/tablets",
        "icon": "grid",
    },
    {
        "name": "Expenses",
        "slug": "expenses",
        "type": AppType.EXTERNAL,
        "external_url": "https://example.com/expenses",
        "icon": "credit-card",
    },
)


class SeedError(Exception):
    """Raised when seeding cannot proceed (e.g. ADMIN_PASSWORD missing)."""


def run_seed(db: Session, settings: Settings) -> bool:
    """
    Seed the database. Returns False (and changes nothing) if users already exist.
    Everything is written in one transaction.
    """
    user_count = db.execute(select(func.count()).select_from(User)).scalar_one()
    if user_count > 0:
        logger.info("Database already seeded, skipping")
        return False
    if settings.ADMIN_PASSWORD is None or not settings.ADMIN_PASSWORD.get_secret_value():
        raise SeedError("ADMIN_PASSWORD environment variable is required for seeding")

    admin = User(
        username=settings.ADMIN_USERNAME,
        password_hash=hash_password(settings.ADMIN_PASSWORD.get_secret_value()),
        global_role=Role.ADMIN,
        is_active=True,
    )
    db.add(admin)
    db.flush()

    apps = [App(version="1.0.0", is_active=True, **data) for data in SAMPLE_APPS]
    db.add_all(apps)
    db.flush()
    for app in apps:
        db.add(UserApp(user_id=admin.id, app_id=app.id))

    db.add(
        AuditLog(
            user_id=admin.id,
            action="seed_completed",
            metadata_={"appsCreated": len(apps), "timestamp": datetime.now(UTC).isoformat()},
        )
    )
    db.commit()
    logger.info(
        "Database seeding completed",
        extra={"admin_username": admin.username, "apps_created": len(apps)},
    )
    return True


def main() -> int:
    settings = get_settings()
    configure_logging(settings)
    db = SessionLocal()
    try:
        run_seed(db, settings)
        return 0
    except SeedError as e:
        logger.error("%s", e)
        return 1
    except Exception as e:
        db.rollback()
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
