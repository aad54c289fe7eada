"""
Test environment. Settings are read when app.core.config is first imported,
so the variables below must be set before any app module loads.

DATABASE_URL=sqlite:// gives one in-memory database shared through a
StaticPool; api_support.ApiTestCase creates and drops the schema per test.
"""

import os

os.environ.setdefault("APP_ENV", "dev")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret-that-is-at-least-32-characters-long")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ZOHO_SERVICE_URL", "http://zoho.test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
