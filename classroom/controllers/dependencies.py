"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.database import get_session
from classroom.domain.actors import Actor, StudentContext, TeacherContext, actor_for
from classroom.exceptions import Forbidden, Unauthenticated
from classroom.models.user import User as UserModel
from classroom.utils import AuthenticationError, decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)
SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    session: SessionDep,
) -> UserModel:
    """Resolve and validate the user referenced by the bearer token."""

    if not token:
        raise Unauthenticated("Authentication required")

    try:
        payload = decode_access_token(token)
        user_id = int(payload.sub)
    except (AuthenticationError, ValueError):
        raise Unauthenticated("Invalid or expired token") from None

    result = await session.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise Unauthenticated("User not found")

    return user


CurrentUserDep = Annotated[UserModel, Depends(get_current_user)]


async def get_current_actor(user: CurrentUserDep) -> Actor:
    return actor_for(user)


async def require_teacher(actor: Annotated[Actor, Depends(get_current_actor)]) -> TeacherContext:
    if not isinstance(actor, TeacherContext):
        raise Forbidden("Teacher access required")
    return actor


async def require_student(actor: Annotated[Actor, Depends(get_current_actor)]) -> StudentContext:
    if not isinstance(actor, StudentContext):
        raise Forbidden("Students only")
    return actor


ActorDep = Annotated[Actor, Depends(get_current_actor)]
TeacherDep = Annotated[TeacherContext, Depends(require_teacher)]
StudentDep = Annotated[StudentContext, Depends(require_student)]


__all__ = [
    "ActorDep",
    "CurrentUserDep",
    "SessionDep",
    "StudentDep",
    "TeacherDep",
    "get_current_actor",
    "get_current_user",
    "oauth2_scheme",
    "require_student",
    "require_teacher",
]
