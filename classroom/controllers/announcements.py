"""Group announcements and read receipts."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from classroom.controllers.dependencies import (
    ActorDep,
    SessionDep,
    StudentDep,
    TeacherDep,
)
from classroom.domain.actors import StudentContext
from classroom.exceptions import NotFound
from classroom.models.announcement import Announcement, AnnouncementRead
from classroom.models.group_membership import GroupMembership
from classroom.models.user import User as UserModel
from classroom.services.access import (
    ensure_member,
    ensure_member_or_owner,
    ensure_owner,
    load_group,
)
from classroom.views import (
    AnnouncementCreateRequest,
    AnnouncementResponse,
    MessageResponse,
    UnreadCountResponse,
)

router = APIRouter(prefix="/api", tags=["announcements"])

logger = logging.getLogger(__name__)


def _serialize(
    announcement: Announcement,
    teacher_name: str | None,
    is_read: bool | None = None,
) -> AnnouncementResponse:
    return AnnouncementResponse(
        id=announcement.id,
        groupId=announcement.group_id,
        teacherId=announcement.teacher_id,
        teacherName=teacher_name,
        message=announcement.message,
        createdAt=announcement.created_at,
        isRead=is_read,
    )


@router.post(
    "/announcements",
    response_model=AnnouncementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_announcement(
    payload: AnnouncementCreateRequest,
    teacher: TeacherDep,
    session: SessionDep,
) -> AnnouncementResponse:
    group = await load_group(session, payload.groupId)
    ensure_owner(group, teacher)

    announcement = Announcement(
        group_id=group.id,
        teacher_id=teacher.user_id,
        message=payload.message,
    )
    session.add(announcement)
    await session.commit()
    await session.refresh(announcement)

    logger.info("Teacher %s posted announcement %s", teacher.user_id, announcement.id)
    return _serialize(announcement, teacher.name)


@router.get("/announcements/{group_id}", response_model=list[AnnouncementResponse])
async def list_announcements(
    group_id: int,
    actor: ActorDep,
    session: SessionDep,
) -> list[AnnouncementResponse]:
    """Newest first; students also see whether they have read each one."""

    group = await load_group(session, group_id)
    await ensure_member_or_owner(session, group, actor)

    rows = (
        await session.execute(
            select(Announcement, UserModel.name)
            .outerjoin(UserModel, UserModel.id == Announcement.teacher_id)
            .where(Announcement.group_id == group.id)
            .order_by(Announcement.created_at.desc(), Announcement.id.desc())
        )
    ).all()

    if not isinstance(actor, StudentContext):
        return [_serialize(announcement, name) for announcement, name in rows]

    read_ids: set[int] = set()
    if rows:
        read_ids = set(
            (
                await session.execute(
                    select(AnnouncementRead.announcement_id).where(
                        AnnouncementRead.student_id == actor.user_id,
                        AnnouncementRead.announcement_id.in_(
                            [announcement.id for announcement, _ in rows]
                        ),
                    )
                )
            ).scalars()
        )
    return [
        _serialize(announcement, name, announcement.id in read_ids)
        for announcement, name in rows
    ]


@router.post("/announcements/{announcement_id}/read", response_model=MessageResponse)
async def mark_announcement_read(
    announcement_id: int,
    student: StudentDep,
    session: SessionDep,
) -> MessageResponse:
    """Record a read receipt; marking twice leaves a single receipt."""

    announcement = (
        await session.execute(
            select(Announcement).where(Announcement.id == announcement_id)
        )
    ).scalar_one_or_none()
    if announcement is None:
        raise NotFound("Announcement not found")

    group = await load_group(session, announcement.group_id)
    await ensure_member(session, group, student)

    existing = await session.execute(
        select(AnnouncementRead.id).where(
            AnnouncementRead.announcement_id == announcement.id,
            AnnouncementRead.student_id == student.user_id,
        )
    )
    if existing.scalar_one_or_none() is None:
        session.add(
            AnnouncementRead(announcement_id=announcement.id, student_id=student.user_id)
        )
        try:
            await session.commit()
        except IntegrityError:
            # Marked concurrently; the unique pair already exists.
            await session.rollback()

    return MessageResponse(message="Marked as read")


@router.get("/unread-counts", response_model=UnreadCountResponse)
async def unread_counts(
    actor: ActorDep,
    session: SessionDep,
) -> UnreadCountResponse:
    """Unread announcements across the student's groups; zero for teachers."""

    if not isinstance(actor, StudentContext):
        return UnreadCountResponse(unreadCount=0)

    read = select(AnnouncementRead.announcement_id).where(
        AnnouncementRead.student_id == actor.user_id
    )
    count = (
        await session.execute(
            select(func.count(Announcement.id))
            .select_from(Announcement)
            .join(GroupMembership, GroupMembership.group_id == Announcement.group_id)
            .where(
                GroupMembership.user_id == actor.user_id,
                Announcement.id.not_in(read),
            )
        )
    ).scalar_one()
    return UnreadCountResponse(unreadCount=count)
