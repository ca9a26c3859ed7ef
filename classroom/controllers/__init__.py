"""FastAPI routers acting as controllers in the MVC architecture."""

from . import analytics, announcements, auth, groups, submissions, tasks

__all__ = ["analytics", "announcements", "auth", "groups", "submissions", "tasks"]
