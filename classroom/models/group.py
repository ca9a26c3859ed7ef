"""SQLAlchemy model defining class groups."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from classroom.models.base import Base, utcnow

JOIN_CODE_LENGTH = 6


class Group(Base):
    """Represents a teacher-owned class roster."""

    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    join_code = Column(
        String(JOIN_CODE_LENGTH),
        unique=True,
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, nullable=False, default=utcnow)


__all__ = ["Group", "JOIN_CODE_LENGTH"]
