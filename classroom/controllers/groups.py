"""Endpoints for group creation and membership management."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from classroom.controllers.dependencies import (
    ActorDep,
    SessionDep,
    StudentDep,
    TeacherDep,
)
from classroom.domain.actors import TeacherContext
from classroom.exceptions import Conflict, NotFound
from classroom.models.group import Group
from classroom.models.group_membership import GroupMembership
from classroom.models.user import User as UserModel
from classroom.services import delete_upload
from classroom.services import cascade
from classroom.services.access import (
    count_members,
    count_members_by_group,
    ensure_member_or_owner,
    ensure_owner,
    get_membership,
    load_group,
)
from classroom.services.join_codes import draw_unused_join_code
from classroom.views import (
    GroupCreateRequest,
    GroupMemberResponse,
    GroupResponse,
    JoinGroupRequest,
    JoinGroupResponse,
    MessageResponse,
)

router = APIRouter(prefix="/api/groups", tags=["groups"])

logger = logging.getLogger(__name__)

_CREATE_ATTEMPTS = 3


def _serialize_group(group: Group, owner_name: str, member_count: int) -> GroupResponse:
    return GroupResponse(
        id=group.id,
        name=group.name,
        ownerId=group.owner_id,
        ownerName=owner_name,
        joinCode=group.join_code,
        memberCount=member_count,
        createdAt=group.created_at,
    )


async def _owner_name(session: SessionDep, group: Group) -> str:
    result = await session.execute(
        select(UserModel.name).where(UserModel.id == group.owner_id)
    )
    return result.scalar_one_or_none() or "Unknown"


async def _describe(session: SessionDep, group: Group) -> GroupResponse:
    return _serialize_group(
        group,
        await _owner_name(session, group),
        await count_members(session, group.id),
    )


@router.get("", response_model=list[GroupResponse])
async def list_groups(
    actor: ActorDep,
    session: SessionDep,
) -> list[GroupResponse]:
    """Return groups owned by the teacher or joined by the student."""

    query = select(Group, UserModel.name).join(UserModel, UserModel.id == Group.owner_id)
    if isinstance(actor, TeacherContext):
        query = query.where(Group.owner_id == actor.user_id)
    else:
        query = query.join(GroupMembership, GroupMembership.group_id == Group.id).where(
            GroupMembership.user_id == actor.user_id
        )

    rows = (await session.execute(query.order_by(Group.name, Group.id))).all()
    counts = await count_members_by_group(session, [group.id for group, _ in rows])
    return [
        _serialize_group(group, owner_name, counts.get(group.id, 0))
        for group, owner_name in rows
    ]


@router.post(
    "",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_group(
    payload: GroupCreateRequest,
    teacher: TeacherDep,
    session: SessionDep,
) -> GroupResponse:
    """Create a group owned by the calling teacher with a fresh join code."""

    for attempt in range(1, _CREATE_ATTEMPTS + 1):
        group = Group(
            name=payload.name,
            owner_id=teacher.user_id,
            join_code=await draw_unused_join_code(session),
        )
        session.add(group)
        try:
            await session.commit()
        except IntegrityError:
            # Another request took the same code between the check and the insert.
            await session.rollback()
            logger.warning("Join code collision on attempt %d", attempt)
            continue

        await session.refresh(group)
        logger.info("Teacher %s created group %s", teacher.user_id, group.id)
        return _serialize_group(group, teacher.name, 0)

    raise Conflict("Unable to allocate a unique join code, please retry")


@router.post("/join", response_model=JoinGroupResponse)
async def join_group(
    payload: JoinGroupRequest,
    student: StudentDep,
    session: SessionDep,
) -> JoinGroupResponse:
    """Enrol the calling student in the group holding the join code."""

    result = await session.execute(
        select(Group).where(Group.join_code == payload.joinCode)
    )
    group = result.scalar_one_or_none()
    if group is None:
        raise NotFound("Invalid join code")

    if await get_membership(session, group.id, student.user_id):
        raise Conflict("Already a member")

    session.add(GroupMembership(group_id=group.id, user_id=student.user_id))
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise Conflict("Already a member") from exc

    logger.info("Student %s joined group %s", student.user_id, group.id)
    return JoinGroupResponse(
        message="Joined group successfully",
        group=await _describe(session, group),
    )


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: int,
    actor: ActorDep,
    session: SessionDep,
) -> GroupResponse:
    """Return a single group visible to its owner and members."""

    group = await load_group(session, group_id)
    await ensure_member_or_owner(session, group, actor)
    return await _describe(session, group)


@router.delete("/{group_id}", response_model=MessageResponse)
async def delete_group(
    group_id: int,
    teacher: TeacherDep,
    session: SessionDep,
) -> MessageResponse:
    """Delete a group owned by the teacher, cascading to its dependents."""

    group = await load_group(session, group_id)
    ensure_owner(group, teacher, "Only the group owner can delete it")

    file_urls = await cascade.delete_group(session, group)
    await session.commit()
    for url in file_urls:
        await delete_upload(url)

    logger.info("Teacher %s deleted group %s", teacher.user_id, group_id)
    return MessageResponse(message="Group deleted")


@router.post("/{group_id}/leave", response_model=MessageResponse)
async def leave_group(
    group_id: int,
    actor: ActorDep,
    session: SessionDep,
) -> MessageResponse:
    """Remove the caller's own membership; past submissions are kept."""

    group = await load_group(session, group_id)
    membership = await get_membership(session, group.id, actor.user_id)
    if membership is None:
        raise NotFound("Membership not found")

    await session.delete(membership)
    await session.commit()
    logger.info("User %s left group %s", actor.user_id, group_id)
    return MessageResponse(message="Left group successfully")


@router.get("/{group_id}/members", response_model=list[GroupMemberResponse])
async def list_group_members(
    group_id: int,
    actor: ActorDep,
    session: SessionDep,
) -> list[GroupMemberResponse]:
    """Return the students enrolled in a group."""

    group = await load_group(session, group_id)
    await ensure_member_or_owner(session, group, actor)

    result = await session.execute(
        select(GroupMembership, UserModel)
        .join(UserModel, UserModel.id == GroupMembership.user_id)
        .where(GroupMembership.group_id == group_id)
        .order_by(UserModel.name, UserModel.id)
    )
    return [
        GroupMemberResponse(
            id=user.id,
            name=user.name,
            email=user.email,
            joinedAt=membership.joined_at,
        )
        for membership, user in result.all()
    ]


@router.delete("/{group_id}/members/{member_id}", response_model=MessageResponse)
async def remove_group_member(
    group_id: int,
    member_id: int,
    teacher: TeacherDep,
    session: SessionDep,
) -> MessageResponse:
    """Allow the owner to remove a student; their submissions are kept."""

    group = await load_group(session, group_id)
    ensure_owner(group, teacher, "Only the owner can remove members")

    membership = await get_membership(session, group.id, member_id)
    if membership is None:
        raise NotFound("Membership not found")

    await session.delete(membership)
    await session.commit()
    logger.info("Teacher %s removed user %s from group %s", teacher.user_id, member_id, group_id)
    return MessageResponse(message="Student removed")
