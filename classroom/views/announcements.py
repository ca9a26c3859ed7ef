"""Pydantic schemas for announcements."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from classroom.views.common import UtcDateTime


class AnnouncementCreateRequest(BaseModel):
    groupId: int = Field(..., ge=1)
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Message cannot be empty")
        return stripped


class AnnouncementResponse(BaseModel):
    id: int
    groupId: int
    teacherId: int
    teacherName: Optional[str] = None
    message: str
    createdAt: UtcDateTime
    # Only meaningful for students.
    isRead: Optional[bool] = None


class UnreadCountResponse(BaseModel):
    unreadCount: int


__all__ = [
    "AnnouncementCreateRequest",
    "AnnouncementResponse",
    "UnreadCountResponse",
]
