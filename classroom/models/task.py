"""SQLAlchemy models for tasks and the reminders students dismiss."""

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

DEFAULT_TASK_TYPE = "text_file"


class Task(Base):
    """Work assigned by a teacher to one group."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(
        Integer,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    task_type = Column(String(32), nullable=False, default=DEFAULT_TASK_TYPE)
    due_date = Column(DateTime, nullable=False, index=True)
    file_url = Column(String(512), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class ReminderDismissal(Base):
    """Marks an urgent-deadline reminder as acknowledged by a student."""

    __tablename__ = "reminder_dismissals"

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
    dismissed_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint(
            "task_id",
            "student_id",
            name="uq_reminder_dismissals_task_student",
        ),
    )


__all__ = ["Task", "ReminderDismissal", "DEFAULT_TASK_TYPE"]
