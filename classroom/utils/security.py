"""Password hashing and access token helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from classroom.config.settings import settings
from classroom.models.user import User, UserRole

_SALT_BYTES = 16
_ITERATIONS = 120_000


def _derive(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _ITERATIONS)


def hash_password(password: str) -> str:
    """Return ``base64(salt + PBKDF2-SHA256 digest)`` for storage."""

    salt = os.urandom(_SALT_BYTES)
    return base64.b64encode(salt + _derive(password, salt)).decode("ascii")


def verify_password(password: str, hashed: str) -> bool:
    try:
        raw = base64.b64decode(hashed.encode("ascii"), validate=True)
    except (ValueError, TypeError):
        return False

    if len(raw) <= _SALT_BYTES:
        return False
    salt, digest = raw[:_SALT_BYTES], raw[_SALT_BYTES:]
    return hmac.compare_digest(_derive(password, salt), digest)


class AuthenticationError(Exception):
    """Raised when a bearer token is malformed, tampered with or expired."""


class TokenUser(BaseModel):
    """Identity claims embedded in every access token."""

    id: int
    email: str
    role: UserRole
    name: str


class TokenPayload(BaseModel):
    sub: str
    exp: datetime
    user: TokenUser
    iat: datetime | None = None


def _signing_key() -> str:
    return settings.security.jwt_secret_key.get_secret_value()


def create_access_token(
    user: User,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a token carrying the user's id, email, role and name."""

    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(
        minutes=settings.security.access_token_expires_minutes
    )
    claims: dict[str, Any] = {
        "sub": str(user.id),
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "user": TokenUser(
            id=user.id,
            email=user.email,
            role=UserRole(user.role),
            name=user.name,
        ).model_dump(mode="json"),
    }
    return jwt.encode(claims, _signing_key(), algorithm=settings.security.jwt_algorithm)


def decode_access_token(token: str) -> TokenPayload:
    """Verify signature and expiry, then parse the claims."""

    try:
        claims = jwt.decode(
            token, _signing_key(), algorithms=[settings.security.jwt_algorithm]
        )
        return TokenPayload.model_validate(claims)
    except (JWTError, ValidationError) as exc:
        raise AuthenticationError("Invalid authentication token") from exc


__all__ = [
    "AuthenticationError",
    "TokenPayload",
    "TokenUser",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
]
