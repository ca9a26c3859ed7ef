"""Utility helpers for the classroom backend."""

from .clock import as_aware_utc, as_naive_utc, utcnow
from .security import (
    AuthenticationError,
    TokenPayload,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "AuthenticationError",
    "TokenPayload",
    "as_aware_utc",
    "as_naive_utc",
    "utcnow",
]
