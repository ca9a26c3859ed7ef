"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .announcement import Announcement, AnnouncementRead  # noqa: F401
from .group import Group  # noqa: F401
from .group_membership import GroupMembership  # noqa: F401
from .submission import Submission  # noqa: F401
from .task import ReminderDismissal, Task  # noqa: F401
from .user import User, UserRole  # noqa: F401

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Group",
    "GroupMembership",
    "Task",
    "ReminderDismissal",
    "Submission",
    "Announcement",
    "AnnouncementRead",
]
