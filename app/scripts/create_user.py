"""
Create a user (e.g. an extra admin). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m app.scripts.create_user alice a-long-password admin
"""
import argparse
import sys

from app.core.database import SessionLocal
from app.core.errors import ApiError
from app.models import Role
from app.schemas.users import UserCreate
from app.services.audit import record_audit
from app.services.users import create_user


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a Launchpad user from the command line.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (at least 8 chars)")
    parser.add_argument("role", nargs="?", default=Role.USER.value, choices=[r.value for r in Role])
    args = parser.parse_args()

    db = SessionLocal()
    try:
        user = create_user(
            db,
            UserCreate(username=args.username.strip(), password=args.password, global_role=Role(args.role)),
        )
        record_audit(db, "user_created", metadata={"targetUserId": user.id, "source": "cli"})
        print(f"Created user '{user.username}' with role '{args.role}'.")
        return 0
    except ApiError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
