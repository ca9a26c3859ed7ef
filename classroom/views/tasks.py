"""Pydantic schemas for tasks."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from classroom.views.common import UtcDateTime


class TaskResponse(BaseModel):
    """Serialized task."""

    id: int
    groupId: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("groupId", "group_id"),
        serialization_alias="groupId",
    )
    title: str
    description: str
    taskType: str = Field(
        ...,
        validation_alias=AliasChoices("taskType", "task_type"),
        serialization_alias="taskType",
    )
    dueDate: UtcDateTime = Field(
        ...,
        validation_alias=AliasChoices("dueDate", "due_date"),
        serialization_alias="dueDate",
    )
    fileUrl: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("fileUrl", "file_url"),
        serialization_alias="fileUrl",
    )
    createdAt: UtcDateTime = Field(
        ...,
        validation_alias=AliasChoices("createdAt", "created_at"),
        serialization_alias="createdAt",
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class StudentTaskResponse(TaskResponse):
    """Task as seen by a student, with their own submission status."""

    groupName: Optional[str] = None
    hasSubmitted: bool = False
    score: Optional[int] = None


class TaskDetailsResponse(TaskResponse):
    """Task enriched with its group and teacher names."""

    groupName: str
    teacherName: str


__all__ = ["TaskResponse", "StudentTaskResponse", "TaskDetailsResponse"]
