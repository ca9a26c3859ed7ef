"""Authentication controller providing registration and login endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from classroom.config.settings import settings
from classroom.controllers.dependencies import CurrentUserDep, SessionDep
from classroom.exceptions import Conflict, Unauthenticated
from classroom.models.user import User as UserModel
from classroom.telemetry import increment_login, increment_registration
from classroom.utils import create_access_token, hash_password, verify_password
from classroom.views import AuthResponse, LoginRequest, RegisterRequest, UserResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = logging.getLogger(__name__)


def _auth_response(user: UserModel) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        token=create_access_token(user),
        expires_in=settings.security.access_token_expires_minutes * 60,
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    session: SessionDep,
) -> AuthResponse:
    """Create an account and issue its first access token."""

    email = payload.email.lower()
    result = await session.execute(select(UserModel).where(UserModel.email == email))
    if result.scalar_one_or_none():
        raise Conflict("Email already registered")

    user = UserModel(
        name=payload.name.strip(),
        email=email,
        password_hash=hash_password(payload.password),
        role=payload.role,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise Conflict("Email already registered") from exc

    await session.refresh(user)
    increment_registration(user.role.value)
    logger.info("Registered %s account %s", user.role.value, user.id)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    session: SessionDep,
) -> AuthResponse:
    """Validate credentials and issue a JWT access token."""

    result = await session.execute(
        select(UserModel).where(UserModel.email == payload.email.lower())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(payload.password, user.password_hash):
        raise Unauthenticated("Invalid email or password")

    increment_login()
    return _auth_response(user)


@router.get("/me", response_model=UserResponse)
async def me(current_user: CurrentUserDep) -> UserResponse:
    return UserResponse.model_validate(current_user)
