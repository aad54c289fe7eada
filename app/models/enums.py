"""Closed value sets shared by ORM models and API schemas."""

import enum


class Role(str, enum.Enum):
    """Global role of a user account."""

    ADMIN = "admin"
    USER = "user"


class AppType(str, enum.Enum):
    """How an app is launched: an in-portal path or an external URL."""

    INTERNAL = "internal"
    EXTERNAL = "external"
