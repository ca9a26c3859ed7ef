"""Analytics aggregation and grade export."""

from __future__ import annotations

import csv
import io
from collections import defaultdict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.domain.actors import Actor, TeacherContext
from classroom.domain.services import (
    RateSample,
    average_score,
    combined_rate,
    percentage,
)
from classroom.models.group import Group
from classroom.models.group_membership import GroupMembership
from classroom.models.submission import Submission
from classroom.models.task import Task
from classroom.models.user import User
from classroom.services.access import count_members_by_group
from classroom.utils.clock import as_aware_utc
from classroom.views.analytics import AnalyticsResponse, GroupStats, StatsResponse

CSV_HEADER = ("Task", "Student Name", "Student Email", "Submitted At", "Score")
NOT_GRADED = "Not Graded"


async def teacher_analytics(session: AsyncSession, teacher_id: int) -> AnalyticsResponse:
    """Average score and submission rate over every group the teacher owns.

    The rate divides by the real roster of each group (tasks x members).
    """

    groups = (
        await session.execute(
            select(Group).where(Group.owner_id == teacher_id).order_by(Group.name)
        )
    ).scalars().all()
    if not groups:
        return AnalyticsResponse()

    group_ids = [group.id for group in groups]
    members = await count_members_by_group(session, group_ids)

    task_rows = (
        await session.execute(
            select(Task.id, Task.group_id).where(Task.group_id.in_(group_ids))
        )
    ).all()
    tasks_by_group: dict[int, list[int]] = defaultdict(list)
    for task_id, group_id in task_rows:
        tasks_by_group[group_id].append(task_id)

    scores_by_task: dict[int, list[int | None]] = defaultdict(list)
    if task_rows:
        submission_rows = await session.execute(
            select(Submission.task_id, Submission.score).where(
                Submission.task_id.in_([task_id for task_id, _ in task_rows])
            )
        )
        for task_id, score in submission_rows.all():
            scores_by_task[task_id].append(score)

    group_stats: list[GroupStats] = []
    samples: list[RateSample] = []
    all_scores: list[int | None] = []
    for group in groups:
        group_task_ids = tasks_by_group.get(group.id, [])
        group_scores = [
            score for task_id in group_task_ids for score in scores_by_task[task_id]
        ]
        sample = RateSample(
            submissions=len(group_scores),
            task_count=len(group_task_ids),
            member_count=members.get(group.id, 0),
        )
        samples.append(sample)
        all_scores.extend(group_scores)
        group_stats.append(
            GroupStats(
                groupId=group.id,
                groupName=group.name,
                taskCount=sample.task_count,
                memberCount=sample.member_count,
                submissionRate=sample.rate,
                averageScore=average_score(group_scores),
            )
        )

    return AnalyticsResponse(
        totalGroups=len(groups),
        totalTasks=len(task_rows),
        totalSubmissions=len(all_scores),
        averageScore=average_score(all_scores),
        submissionRate=combined_rate(samples),
        groupStats=group_stats,
    )


async def student_analytics(session: AsyncSession, student_id: int) -> AnalyticsResponse:
    """Average score and submission rate over the student's own work."""

    group_ids = list(
        (
            await session.execute(
                select(GroupMembership.group_id).where(
                    GroupMembership.user_id == student_id
                )
            )
        ).scalars()
    )
    if not group_ids:
        return AnalyticsResponse()

    task_ids = list(
        (
            await session.execute(select(Task.id).where(Task.group_id.in_(group_ids)))
        ).scalars()
    )
    scores: list[int | None] = []
    if task_ids:
        scores = list(
            (
                await session.execute(
                    select(Submission.score).where(
                        Submission.student_id == student_id,
                        Submission.task_id.in_(task_ids),
                    )
                )
            ).scalars()
        )

    return AnalyticsResponse(
        totalGroups=len(group_ids),
        totalTasks=len(task_ids),
        totalSubmissions=len(scores),
        averageScore=average_score(scores),
        submissionRate=percentage(len(scores), len(task_ids)),
    )


async def analytics_for(session: AsyncSession, actor: Actor) -> AnalyticsResponse:
    if isinstance(actor, TeacherContext):
        return await teacher_analytics(session, actor.user_id)
    return await student_analytics(session, actor.user_id)


async def teacher_stats(session: AsyncSession, teacher_id: int) -> StatsResponse:
    """Dashboard counters: ungraded submissions and assigned tasks."""

    owned = select(Group.id).where(Group.owner_id == teacher_id)
    total_tasks = (
        await session.execute(
            select(func.count(Task.id)).where(Task.group_id.in_(owned))
        )
    ).scalar_one()
    pending = (
        await session.execute(
            select(func.count(Submission.id))
            .select_from(Submission)
            .join(Task, Task.id == Submission.task_id)
            .where(Task.group_id.in_(owned), Submission.score.is_(None))
        )
    ).scalar_one()
    return StatsResponse(pendingSubmissions=pending, totalTasks=total_tasks)


async def export_group_csv(session: AsyncSession, group: Group) -> str:
    """Render every submission of the group's tasks as CSV."""

    result = await session.execute(
        select(
            Task.title,
            User.name,
            User.email,
            Submission.submitted_at,
            Submission.score,
        )
        .select_from(Submission)
        .join(Task, Task.id == Submission.task_id)
        .join(User, User.id == Submission.student_id)
        .where(Task.group_id == group.id)
        .order_by(Task.due_date, Task.id, User.name)
    )

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for title, name, email, submitted_at, score in result.all():
        writer.writerow(
            [
                title,
                name,
                email,
                as_aware_utc(submitted_at).isoformat(),
                score if score is not None else NOT_GRADED,
            ]
        )
    return buffer.getvalue()


__all__ = [
    "CSV_HEADER",
    "NOT_GRADED",
    "analytics_for",
    "export_group_csv",
    "student_analytics",
    "teacher_analytics",
    "teacher_stats",
]
