"""Password hashing and JWT creation/verification for authentication."""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import JWT_ALGORITHM, Settings

# Min/max lengths for login and password validation.
LOGIN_MIN_LEN = 1
LOGIN_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


class TokenConfigurationError(RuntimeError):
    """A signing secret is missing. Raised loudly; never mapped to a client error."""


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def hash_password(plain_password: str, rounds: int = 12) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash."""
    if not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _access_secret(settings: Settings) -> str:
    if settings.ACCESS_TOKEN_SECRET is None:
        raise TokenConfigurationError("ACCESS_TOKEN_SECRET is not set")
    return settings.ACCESS_TOKEN_SECRET.get_secret_value()


def _refresh_secret(settings: Settings) -> str:
    if settings.REFRESH_TOKEN_SECRET is None:
        raise TokenConfigurationError("REFRESH_TOKEN_SECRET is not set")
    return settings.REFRESH_TOKEN_SECRET.get_secret_value()


def ensure_token_secrets(settings: Settings) -> None:
    """Fail fast at startup when either signing secret is missing."""
    _access_secret(settings)
    _refresh_secret(settings)


def create_access_token(
    settings: Settings,
    user_id: str,
    login: str,
    role: str,
    now: datetime | None = None,
) -> str:
    """Create a short-lived access token carrying id, login and role."""
    secret = _access_secret(settings)
    issued = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "id": user_id,
        "login": login,
        "role": role,
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def create_refresh_token(
    settings: Settings,
    user_id: str,
    login: str,
    now: datetime | None = None,
) -> str:
    """
    Create a long-lived refresh token carrying id and login.

    jti makes every token unique, so a rotation never hands back the same string
    even when two tokens are issued within the same second.
    """
    secret = _refresh_secret(settings)
    issued = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "id": user_id,
        "login": login,
        "jti": uuid.uuid4().hex,
        "iat": issued,
        "exp": issued + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def issue_token_pair(settings: Settings, user_id: str, login: str, role: str) -> TokenPair:
    """Create an access/refresh pair. Callers persist the refresh token."""
    return TokenPair(
        access_token=create_access_token(settings, user_id, login, role),
        refresh_token=create_refresh_token(settings, user_id, login),
    )


def _decode(token: str, secret: str) -> dict[str, Any]:
    payload = jwt.decode(
        token,
        secret,
        algorithms=[JWT_ALGORITHM],
        leeway=0,
        options={"require": ["exp", "iat"], "verify_nbf": True},
    )
    if not payload.get("id") or not payload.get("login"):
        raise jwt.InvalidTokenError("Token is missing identity claims")
    return payload


def decode_access_token(settings: Settings, token: str) -> dict[str, Any]:
    """
    Decode and validate an access token; return payload (id, login, role, iat, exp).
    Raises jwt.ExpiredSignatureError when expired, jwt.PyJWTError on any other defect.
    """
    return _decode(token, _access_secret(settings))


def decode_refresh_token(settings: Settings, token: str) -> dict[str, Any]:
    """Decode and validate a refresh token. Raises jwt.PyJWTError when invalid or expired."""
    return _decode(token, _refresh_secret(settings))
