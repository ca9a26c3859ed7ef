"""Timestamp normalisation helpers."""

from __future__ import annotations

from datetime import datetime, timezone

from classroom.models.base import utcnow


def as_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC."""

    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def as_aware_utc(value: datetime) -> datetime:
    """Attach UTC to a stored naive timestamp for serialisation."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


__all__ = ["as_aware_utc", "as_naive_utc", "utcnow"]
