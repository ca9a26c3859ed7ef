"""Declarative base shared by every ORM model."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, the storage convention for every DateTime column."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


__all__ = ["Base", "utcnow"]
