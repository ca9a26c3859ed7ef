"""SQLAlchemy model for student submissions."""

from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from classroom.models.base import Base, utcnow


class Submission(Base):
    """A student's one-time response to a task."""

    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(
        Integer,
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text_content = Column(Text, nullable=True)
    file_url = Column(String(512), nullable=True)
    submitted_at = Column(DateTime, nullable=False, default=utcnow)
    # Null until graded.
    score = Column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "task_id",
            "student_id",
            name="uq_submissions_task_student",
        ),
    )


__all__ = ["Submission"]
