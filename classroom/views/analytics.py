"""Pydantic schemas for analytics and dashboard counters."""

from pydantic import BaseModel, Field


class GroupStats(BaseModel):
    """Per-group breakdown of a teacher's analytics."""

    groupId: int
    groupName: str
    taskCount: int
    memberCount: int
    submissionRate: int = Field(..., description="Percentage, 0-100")
    averageScore: int


class AnalyticsResponse(BaseModel):
    totalGroups: int = 0
    totalTasks: int = 0
    totalSubmissions: int = 0
    averageScore: int = 0
    submissionRate: int = 0
    groupStats: list[GroupStats] = []


class StatsResponse(BaseModel):
    pendingSubmissions: int = 0
    totalTasks: int = 0
