"""Capabilities resolved once per request from the bearer credential."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from classroom.models.user import User, UserRole


@dataclass(frozen=True, slots=True)
class TeacherContext:
    """Caller holding the teacher capability."""

    user_id: int
    name: str
    email: str

    role: ClassVar[UserRole] = UserRole.TEACHER


@dataclass(frozen=True, slots=True)
class StudentContext:
    """Caller holding the student capability."""

    user_id: int
    name: str
    email: str

    role: ClassVar[UserRole] = UserRole.STUDENT


Actor = Union[TeacherContext, StudentContext]


def actor_for(user: User) -> Actor:
    """Build the capability matching the stored user's role."""

    context_cls = TeacherContext if user.role == UserRole.TEACHER else StudentContext
    return context_cls(user_id=user.id, name=user.name, email=user.email)


__all__ = ["Actor", "StudentContext", "TeacherContext", "actor_for"]
