"""Password hashing and JWT session token creation/verification."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from pydantic import ValidationError

from app.core.config import get_settings
from app.schemas.auth import TokenClaims

if TYPE_CHECKING:
    from app.core.config import Settings

# Min length for passwords set by users or admins.
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
USERNAME_MAX_LEN = 255


class InvalidTokenError(Exception):
    """Raised when a token has a bad signature, structure or claim payload."""


class ExpiredTokenError(InvalidTokenError):
    """Raised when a token is used at or after its expiry instant."""


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    claims: TokenClaims,
    settings: Settings | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a JWT carrying the session claim set plus iat and exp."""
    settings = settings or get_settings()
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = claims.model_dump(mode="json")
    payload["iat"] = now
    payload["exp"] = now + expires_delta
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, settings: Settings | None = None) -> TokenClaims:
    """
    Verify a JWT and return its claim set.
    Raises ExpiredTokenError when past exp, InvalidTokenError for anything else wrong.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise ExpiredTokenError("Token expired") from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError("Invalid token") from e
    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as e:
        raise InvalidTokenError("Invalid token payload") from e


@lru_cache
def dummy_password_hash() -> str:
    """
    Hash checked when a login names an unknown or inactive account, so the
    response takes as long as a real password check.
    """
    return hash_password("launchpad-timing-equalization")
