"""Pydantic schemas for group management."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from classroom.views.common import UtcDateTime


class GroupCreateRequest(BaseModel):
    """Payload to create a group."""

    name: str = Field(..., min_length=1, max_length=120)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Group name cannot be empty")
        return stripped


class JoinGroupRequest(BaseModel):
    """Payload for a student joining by code."""

    joinCode: str = Field(..., min_length=1, max_length=32)

    @field_validator("joinCode")
    @classmethod
    def normalise_code(cls, value: str) -> str:
        return value.strip().upper()


class GroupResponse(BaseModel):
    """Information about a group."""

    id: int
    name: str
    ownerId: int
    ownerName: str
    joinCode: str
    memberCount: int = 0
    createdAt: UtcDateTime


class GroupMemberResponse(BaseModel):
    """Member of a group with basic profile data."""

    id: int
    name: str
    email: str
    joinedAt: UtcDateTime


class JoinGroupResponse(BaseModel):
    message: str
    group: GroupResponse


__all__ = [
    "GroupCreateRequest",
    "JoinGroupRequest",
    "GroupResponse",
    "GroupMemberResponse",
    "JoinGroupResponse",
]
