"""Hard deletion of groups and tasks together with their dependent rows."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.models.announcement import Announcement, AnnouncementRead
from classroom.models.group import Group
from classroom.models.group_membership import GroupMembership
from classroom.models.submission import Submission
from classroom.models.task import ReminderDismissal, Task


async def _delete_tasks(session: AsyncSession, task_ids: Sequence[int]) -> list[str]:
    if not task_ids:
        return []

    task_files = await session.execute(
        select(Task.file_url).where(Task.id.in_(task_ids), Task.file_url.is_not(None))
    )
    submission_files = await session.execute(
        select(Submission.file_url).where(
            Submission.task_id.in_(task_ids),
            Submission.file_url.is_not(None),
        )
    )
    file_urls = list(task_files.scalars()) + list(submission_files.scalars())

    await session.execute(
        delete(ReminderDismissal).where(ReminderDismissal.task_id.in_(task_ids))
    )
    await session.execute(delete(Submission).where(Submission.task_id.in_(task_ids)))
    await session.execute(delete(Task).where(Task.id.in_(task_ids)))
    return file_urls


async def delete_task(session: AsyncSession, task: Task) -> list[str]:
    """Stage deletion of a task; returns attachment URLs to remove after commit."""

    return await _delete_tasks(session, [task.id])


async def delete_group(session: AsyncSession, group: Group) -> list[str]:
    """Stage deletion of a group and everything hanging off it.

    Returns attachment URLs to remove once the transaction has committed.
    """

    task_rows = await session.execute(select(Task.id).where(Task.group_id == group.id))
    file_urls = await _delete_tasks(session, list(task_rows.scalars()))

    announcement_ids = select(Announcement.id).where(Announcement.group_id == group.id)
    await session.execute(
        delete(AnnouncementRead).where(
            AnnouncementRead.announcement_id.in_(announcement_ids)
        )
    )
    await session.execute(delete(Announcement).where(Announcement.group_id == group.id))
    await session.execute(
        delete(GroupMembership).where(GroupMembership.group_id == group.id)
    )
    await session.execute(delete(Group).where(Group.id == group.id))
    return file_urls


__all__ = ["delete_group", "delete_task"]
