"""Ownership and membership checks shared by the controllers.

Every helper raises a domain error instead of returning a flag, so that a
controller reads as: load the target (404), then check the relationship (403).
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.domain.actors import Actor
from classroom.exceptions import Forbidden, NotFound
from classroom.models.group import Group
from classroom.models.group_membership import GroupMembership
from classroom.models.submission import Submission
from classroom.models.task import Task


async def load_group(session: AsyncSession, group_id: int) -> Group:
    result = await session.execute(select(Group).where(Group.id == group_id))
    group = result.scalar_one_or_none()
    if group is None:
        raise NotFound("Group not found")
    return group


async def load_task(session: AsyncSession, task_id: int) -> Task:
    result = await session.execute(select(Task).where(Task.id == task_id))
    task = result.scalar_one_or_none()
    if task is None:
        raise NotFound("Task not found")
    return task


async def load_task_group(session: AsyncSession, task: Task) -> Group:
    if task.group_id is None:
        raise NotFound("Group not found")
    return await load_group(session, task.group_id)


async def load_submission(session: AsyncSession, submission_id: int) -> Submission:
    result = await session.execute(
        select(Submission).where(Submission.id == submission_id)
    )
    submission = result.scalar_one_or_none()
    if submission is None:
        raise NotFound("Submission not found")
    return submission


async def get_membership(
    session: AsyncSession,
    group_id: int,
    user_id: int,
) -> GroupMembership | None:
    result = await session.execute(
        select(GroupMembership).where(
            GroupMembership.group_id == group_id,
            GroupMembership.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def is_member(session: AsyncSession, group_id: int, user_id: int) -> bool:
    return await get_membership(session, group_id, user_id) is not None


async def count_members(session: AsyncSession, group_id: int) -> int:
    counts = await count_members_by_group(session, [group_id])
    return counts.get(group_id, 0)


async def count_members_by_group(
    session: AsyncSession,
    group_ids: list[int],
) -> dict[int, int]:
    if not group_ids:
        return {}
    result = await session.execute(
        select(GroupMembership.group_id, func.count(GroupMembership.id))
        .where(GroupMembership.group_id.in_(group_ids))
        .group_by(GroupMembership.group_id)
    )
    return {group_id: count for group_id, count in result.all()}


def ensure_owner(group: Group, actor: Actor, message: str = "Not authorized") -> None:
    if group.owner_id != actor.user_id:
        raise Forbidden(message)


async def ensure_member(session: AsyncSession, group: Group, actor: Actor) -> None:
    if not await is_member(session, group.id, actor.user_id):
        raise Forbidden("You are not a member of this group")


async def ensure_member_or_owner(
    session: AsyncSession,
    group: Group,
    actor: Actor,
) -> None:
    if group.owner_id == actor.user_id:
        return
    if not await is_member(session, group.id, actor.user_id):
        raise Forbidden("Access denied")


__all__ = [
    "count_members",
    "count_members_by_group",
    "ensure_member",
    "ensure_member_or_owner",
    "ensure_owner",
    "get_membership",
    "is_member",
    "load_group",
    "load_submission",
    "load_task",
    "load_task_group",
]
