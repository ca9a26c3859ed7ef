"""Task assignment, listing and deadline reminder endpoints."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from classroom.config.settings import settings
from classroom.controllers.dependencies import (
    ActorDep,
    SessionDep,
    StudentDep,
    TeacherDep,
)
from classroom.domain.actors import TeacherContext
from classroom.domain.services import is_urgent
from classroom.exceptions import ValidationFailed
from classroom.models.group import Group
from classroom.models.group_membership import GroupMembership
from classroom.models.submission import Submission
from classroom.models.task import ReminderDismissal, Task
from classroom.models.user import User as UserModel
from classroom.services import cascade, delete_upload, save_upload
from classroom.services.access import (
    ensure_member,
    ensure_member_or_owner,
    ensure_owner,
    load_group,
    load_task,
    load_task_group,
)
from classroom.utils import as_naive_utc, utcnow
from classroom.views import (
    MessageResponse,
    StudentTaskResponse,
    TaskDetailsResponse,
    TaskResponse,
)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])
group_tasks_router = APIRouter(prefix="/api/groups", tags=["tasks"])

logger = logging.getLogger(__name__)


async def _student_tasks(
    session: SessionDep,
    student_id: int,
) -> list[StudentTaskResponse]:
    """Every task of the student's groups, with their own submission status."""

    rows = (
        await session.execute(
            select(Task, Group.name)
            .join(Group, Group.id == Task.group_id)
            .join(GroupMembership, GroupMembership.group_id == Group.id)
            .where(GroupMembership.user_id == student_id)
            .order_by(Task.due_date, Task.id)
        )
    ).all()
    if not rows:
        return []

    scores = dict(
        (
            await session.execute(
                select(Submission.task_id, Submission.score).where(
                    Submission.student_id == student_id,
                    Submission.task_id.in_([task.id for task, _ in rows]),
                )
            )
        ).all()
    )
    return [
        StudentTaskResponse(
            **TaskResponse.model_validate(task).model_dump(),
            groupName=group_name,
            hasSubmitted=task.id in scores,
            score=scores.get(task.id),
        )
        for task, group_name in rows
    ]


@group_tasks_router.get("/{group_id}/tasks", response_model=list[TaskResponse])
async def list_group_tasks(
    group_id: int,
    actor: ActorDep,
    session: SessionDep,
) -> list[TaskResponse]:
    group = await load_group(session, group_id)
    await ensure_member_or_owner(session, group, actor)

    result = await session.execute(
        select(Task).where(Task.group_id == group.id).order_by(Task.due_date, Task.id)
    )
    return [TaskResponse.model_validate(task) for task in result.scalars().all()]


@group_tasks_router.post(
    "/{group_id}/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    group_id: int,
    teacher: TeacherDep,
    session: SessionDep,
    title: Annotated[str, Form(min_length=1, max_length=200)],
    dueDate: Annotated[datetime, Form()],
    description: Annotated[str, Form(max_length=10_000)] = "",
    file: Annotated[Optional[UploadFile], File()] = None,
) -> TaskResponse:
    """Assign a task to a group owned by the teacher, with an optional attachment.

    The due date is stored as given; past dates are accepted.
    """

    group = await load_group(session, group_id)
    ensure_owner(group, teacher)

    title = title.strip()
    if not title:
        raise ValidationFailed("Title is required")

    stored = await save_upload(file)
    task = Task(
        group_id=group.id,
        title=title,
        description=description.strip(),
        due_date=as_naive_utc(dueDate),
        file_url=stored.url if stored else None,
    )
    session.add(task)
    try:
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        if stored:
            await delete_upload(stored.url)
        raise

    await session.refresh(task)

    logger.info("Teacher %s assigned task %s to group %s", teacher.user_id, task.id, group.id)
    return TaskResponse.model_validate(task)


@router.get("/upcoming", response_model=list[StudentTaskResponse])
async def upcoming_tasks(
    actor: ActorDep,
    session: SessionDep,
) -> list[StudentTaskResponse]:
    """Tasks not yet past due, soonest first; empty for teachers."""

    if isinstance(actor, TeacherContext):
        return []

    now = utcnow()
    tasks = await _student_tasks(session, actor.user_id)
    return [task for task in tasks if as_naive_utc(task.dueDate) > now]


@router.get("/urgent", response_model=list[StudentTaskResponse])
async def urgent_tasks(
    actor: ActorDep,
    session: SessionDep,
) -> list[StudentTaskResponse]:
    """Tasks due within the urgent window that the student has not dismissed.

    Submitting does not clear a task from the list; only a dismissal does.
    """

    if isinstance(actor, TeacherContext):
        return []

    dismissed = set(
        (
            await session.execute(
                select(ReminderDismissal.task_id).where(
                    ReminderDismissal.student_id == actor.user_id
                )
            )
        ).scalars()
    )
    window = timedelta(hours=settings.urgent_window_hours)
    now = utcnow()
    return [
        task
        for task in await _student_tasks(session, actor.user_id)
        if task.id not in dismissed
        and is_urgent(as_naive_utc(task.dueDate), now, window)
    ]


@router.get("/all", response_model=list[StudentTaskResponse])
async def all_tasks(
    student: StudentDep,
    session: SessionDep,
) -> list[StudentTaskResponse]:
    return await _student_tasks(session, student.user_id)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    actor: ActorDep,
    session: SessionDep,
) -> TaskResponse:
    task = await load_task(session, task_id)
    group = await load_task_group(session, task)
    await ensure_member_or_owner(session, group, actor)
    return TaskResponse.model_validate(task)


@router.get("/{task_id}/details", response_model=TaskDetailsResponse)
async def get_task_details(
    task_id: int,
    actor: ActorDep,
    session: SessionDep,
) -> TaskDetailsResponse:
    """Task together with its group name and the assigning teacher's name."""

    task = await load_task(session, task_id)
    group = await load_task_group(session, task)
    await ensure_member_or_owner(session, group, actor)

    teacher_name = (
        await session.execute(select(UserModel.name).where(UserModel.id == group.owner_id))
    ).scalar_one_or_none()
    return TaskDetailsResponse(
        **TaskResponse.model_validate(task).model_dump(),
        groupName=group.name,
        teacherName=teacher_name or "Unknown",
    )


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: int,
    teacher: TeacherDep,
    session: SessionDep,
) -> MessageResponse:
    """Delete a task and its submissions; only the group's owner may do so."""

    task = await load_task(session, task_id)
    group = await load_task_group(session, task)
    ensure_owner(group, teacher)

    file_urls = await cascade.delete_task(session, task)
    await session.commit()
    for url in file_urls:
        await delete_upload(url)

    logger.info("Teacher %s deleted task %s", teacher.user_id, task_id)
    return MessageResponse(message="Task deleted")


@router.post("/{task_id}/dismiss-reminder", response_model=MessageResponse)
async def dismiss_reminder(
    task_id: int,
    student: StudentDep,
    session: SessionDep,
) -> MessageResponse:
    """Hide a task from the student's urgent list; repeating is harmless."""

    task = await load_task(session, task_id)
    group = await load_task_group(session, task)
    await ensure_member(session, group, student)

    existing = await session.execute(
        select(ReminderDismissal.id).where(
            ReminderDismissal.task_id == task.id,
            ReminderDismissal.student_id == student.user_id,
        )
    )
    if existing.scalar_one_or_none() is None:
        session.add(ReminderDismissal(task_id=task.id, student_id=student.user_id))
        try:
            await session.commit()
        except IntegrityError:
            # Dismissed concurrently; the unique pair already exists.
            await session.rollback()

    return MessageResponse(message="Reminder dismissed")
