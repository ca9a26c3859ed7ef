"""Pydantic schemas used as views in the MVC architecture."""

from .analytics import AnalyticsResponse, GroupStats, StatsResponse
from .announcements import (
    AnnouncementCreateRequest,
    AnnouncementResponse,
    UnreadCountResponse,
)
from .auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from .common import ErrorResponse, MessageResponse
from .groups import (
    GroupCreateRequest,
    GroupMemberResponse,
    GroupResponse,
    JoinGroupRequest,
    JoinGroupResponse,
)
from .submissions import (
    ScoreUpdateRequest,
    SubmissionResponse,
    SubmissionWithStudentResponse,
)
from .tasks import StudentTaskResponse, TaskDetailsResponse, TaskResponse

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "AuthResponse",
    "GroupCreateRequest",
    "JoinGroupRequest",
    "GroupResponse",
    "GroupMemberResponse",
    "JoinGroupResponse",
    "TaskResponse",
    "StudentTaskResponse",
    "TaskDetailsResponse",
    "ScoreUpdateRequest",
    "SubmissionResponse",
    "SubmissionWithStudentResponse",
    "AnnouncementCreateRequest",
    "AnnouncementResponse",
    "UnreadCountResponse",
    "AnalyticsResponse",
    "GroupStats",
    "StatsResponse",
    "ErrorResponse",
    "MessageResponse",
]
