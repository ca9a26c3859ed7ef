"""Submission and grading endpoints."""

from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from classroom.controllers.dependencies import ActorDep, SessionDep, TeacherDep
from classroom.exceptions import Conflict, ValidationFailed
from classroom.models.group import Group
from classroom.models.submission import Submission
from classroom.models.task import Task
from classroom.models.user import User as UserModel
from classroom.services import delete_upload, save_upload
from classroom.services.access import (
    ensure_member,
    ensure_owner,
    load_submission,
    load_task,
    load_task_group,
)
from classroom.telemetry import increment_submission
from classroom.views import (
    ScoreUpdateRequest,
    SubmissionResponse,
    SubmissionWithStudentResponse,
)

task_submissions_router = APIRouter(prefix="/api/tasks", tags=["submissions"])
router = APIRouter(prefix="/api/submissions", tags=["submissions"])

logger = logging.getLogger(__name__)


def _with_student(
    submission: Submission,
    student: UserModel,
    task_title: str | None = None,
) -> SubmissionWithStudentResponse:
    return SubmissionWithStudentResponse(
        **SubmissionResponse.model_validate(submission).model_dump(),
        studentName=student.name,
        studentEmail=student.email,
        taskTitle=task_title,
    )


async def _teacher_submissions(
    session: SessionDep,
    teacher_id: int,
    *,
    pending_only: bool = False,
) -> list[SubmissionWithStudentResponse]:
    query = (
        select(Submission, UserModel, Task.title)
        .join(Task, Task.id == Submission.task_id)
        .join(Group, Group.id == Task.group_id)
        .join(UserModel, UserModel.id == Submission.student_id)
        .where(Group.owner_id == teacher_id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
    )
    if pending_only:
        query = query.where(Submission.score.is_(None))

    result = await session.execute(query)
    return [
        _with_student(submission, student, title)
        for submission, student, title in result.all()
    ]


@task_submissions_router.post(
    "/{task_id}/submit",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_task(
    task_id: int,
    actor: ActorDep,
    session: SessionDep,
    textContent: Annotated[Optional[str], Form(max_length=50_000)] = None,
    file: Annotated[Optional[UploadFile], File()] = None,
) -> SubmissionResponse:
    """Record a member's one and only submission for a task.

    At least one of ``textContent`` or ``file`` must carry content.
    """

    text = textContent.strip() if textContent else ""
    has_file = file is not None and bool(file.filename)
    if not text and not has_file:
        raise ValidationFailed("Provide text content or a file")

    task = await load_task(session, task_id)
    group = await load_task_group(session, task)
    await ensure_member(session, group, actor)

    existing = await session.execute(
        select(Submission.id).where(
            Submission.task_id == task.id,
            Submission.student_id == actor.user_id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise Conflict("Already submitted")

    stored = await save_upload(file) if has_file else None
    submission = Submission(
        task_id=task.id,
        student_id=actor.user_id,
        text_content=text or None,
        file_url=stored.url if stored else None,
    )
    session.add(submission)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if stored:
            await delete_upload(stored.url)
        raise Conflict("Already submitted") from exc

    await session.refresh(submission)
    increment_submission()
    logger.info("Student %s submitted task %s", actor.user_id, task.id)
    return SubmissionResponse.model_validate(submission)


@task_submissions_router.get(
    "/{task_id}/my-submission",
    response_model=Optional[SubmissionResponse],
)
async def get_my_submission(
    task_id: int,
    actor: ActorDep,
    session: SessionDep,
) -> Optional[SubmissionResponse]:
    """The caller's submission for the task, or ``null`` when there is none."""

    result = await session.execute(
        select(Submission).where(
            Submission.task_id == task_id,
            Submission.student_id == actor.user_id,
        )
    )
    submission = result.scalar_one_or_none()
    return SubmissionResponse.model_validate(submission) if submission else None


@task_submissions_router.get(
    "/{task_id}/submissions",
    response_model=list[SubmissionWithStudentResponse],
)
async def list_task_submissions(
    task_id: int,
    teacher: TeacherDep,
    session: SessionDep,
) -> list[SubmissionWithStudentResponse]:
    task = await load_task(session, task_id)
    group = await load_task_group(session, task)
    ensure_owner(group, teacher)

    result = await session.execute(
        select(Submission, UserModel)
        .join(UserModel, UserModel.id == Submission.student_id)
        .where(Submission.task_id == task.id)
        .order_by(Submission.submitted_at, Submission.id)
    )
    return [
        _with_student(submission, student, task.title)
        for submission, student in result.all()
    ]


@router.get("/all", response_model=list[SubmissionWithStudentResponse])
async def list_all_submissions(
    teacher: TeacherDep,
    session: SessionDep,
) -> list[SubmissionWithStudentResponse]:
    return await _teacher_submissions(session, teacher.user_id)


@router.get("/pending", response_model=list[SubmissionWithStudentResponse])
async def list_pending_submissions(
    teacher: TeacherDep,
    session: SessionDep,
) -> list[SubmissionWithStudentResponse]:
    return await _teacher_submissions(session, teacher.user_id, pending_only=True)


@router.patch("/{submission_id}/score", response_model=SubmissionResponse)
async def score_submission(
    submission_id: int,
    payload: ScoreUpdateRequest,
    teacher: TeacherDep,
    session: SessionDep,
) -> SubmissionResponse:
    """Set or overwrite the score of a submission to a task the teacher owns."""

    submission = await load_submission(session, submission_id)
    task = await load_task(session, submission.task_id)
    group = await load_task_group(session, task)
    ensure_owner(group, teacher)

    submission.score = payload.score
    await session.commit()
    await session.refresh(submission)

    logger.info(
        "Teacher %s scored submission %s with %s",
        teacher.user_id,
        submission.id,
        payload.score,
    )
    return SubmissionResponse.model_validate(submission)
