"""Database bootstrap: admin account, sample apps and assignments, run once."""

import unittest

from pydantic import SecretStr

from app.core.config import get_settings
from app.core.database import SessionLocal, engine
from app.core.security import verify_password
from app.models import App, AuditLog, Base, Role, User, UserApp
from app.scripts.seed import SAMPLE_APPS, SeedError, run_seed


class TestRunSeed(unittest.TestCase):
    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.db = SessionLocal()
        self.settings = get_settings().model_copy(
            update={"ADMIN_USERNAME": "boss", "ADMIN_PASSWORD": SecretStr("seed-password")}
        )

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(engine)

    def test_seeds_admin_with_every_sample_app(self) -> None:
        self.assertTrue(run_seed(self.db, self.settings))

        admin = self.db.query(User).one()
        self.assertEqual(admin.username, "boss")
        self.assertEqual(admin.global_role, Role.ADMIN)
        self.assertTrue(verify_password("seed-password", admin.password_hash))
        self.assertEqual(self.db.query(App).count(), len(SAMPLE_APPS))
        self.assertEqual(self.db.query(UserApp).filter(UserApp.user_id == admin.id).count(), len(SAMPLE_APPS))
        audit = self.db.query(AuditLog).one()
        self.assertEqual(audit.action, "seed_completed")

    def test_second_run_is_a_no_op(self) -> None:
        run_seed(self.db, self.settings)
        self.assertFalse(run_seed(self.db, self.settings))
        self.assertEqual(self.db.query(User).count(), 1)

    def test_missing_admin_password_raises(self) -> None:
        settings = self.settings.model_copy(update={"ADMIN_PASSWORD": None})
        with self.assertRaises(SeedError):
            run_seed(self.db, settings)
        self.assertEqual(self.db.query(User).count(), 0)
