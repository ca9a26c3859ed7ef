"""SQLAlchemy model for application users."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Column, DateTime
from sqlalchemy import Enum as SqlEnum
from sqlalchemy import Integer, String

from classroom.models.base import Base, utcnow


class UserRole(str, Enum):
    """Enumeration of supported user roles."""

    TEACHER = "teacher"
    STUDENT = "student"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    # Fixed at registration; no endpoint updates it.
    role = Column(
        SqlEnum(UserRole, name="user_role"),
        nullable=False,
    )
    created_at = Column(DateTime, nullable=False, default=utcnow)


__all__ = ["User", "UserRole"]
