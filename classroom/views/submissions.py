"""Pydantic schemas for submissions and grading."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from classroom.views.common import UtcDateTime


class ScoreUpdateRequest(BaseModel):
    """Payload used by a teacher to grade a submission."""

    score: int = Field(..., ge=0, le=100)


class SubmissionResponse(BaseModel):
    """Serialized submission."""

    id: int
    taskId: int = Field(
        ...,
        validation_alias=AliasChoices("taskId", "task_id"),
        serialization_alias="taskId",
    )
    studentId: int = Field(
        ...,
        validation_alias=AliasChoices("studentId", "student_id"),
        serialization_alias="studentId",
    )
    textContent: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("textContent", "text_content"),
        serialization_alias="textContent",
    )
    fileUrl: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("fileUrl", "file_url"),
        serialization_alias="fileUrl",
    )
    submittedAt: UtcDateTime = Field(
        ...,
        validation_alias=AliasChoices("submittedAt", "submitted_at"),
        serialization_alias="submittedAt",
    )
    score: Optional[int] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class SubmissionWithStudentResponse(SubmissionResponse):
    """Submission enriched with the student's profile and the task title."""

    studentName: str
    studentEmail: str
    taskTitle: Optional[str] = None


__all__ = [
    "ScoreUpdateRequest",
    "SubmissionResponse",
    "SubmissionWithStudentResponse",
]
