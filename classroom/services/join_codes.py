"""Join code generation for groups."""

from __future__ import annotations

import secrets
import string

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.models.group import JOIN_CODE_LENGTH, Group

JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits
_MAX_DRAWS = 20


class JoinCodeExhausted(RuntimeError):
    """Raised when no unused join code could be drawn."""


def generate_join_code(length: int = JOIN_CODE_LENGTH) -> str:
    """Draw a random code from the fixed alphanumeric alphabet."""

    return "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(length))


async def draw_unused_join_code(session: AsyncSession) -> str:
    """Return a code not currently held by any group.

    The unique constraint on ``groups.join_code`` still arbitrates concurrent
    creators; callers retry on ``IntegrityError``.
    """

    for _ in range(_MAX_DRAWS):
        candidate = generate_join_code()
        result = await session.execute(
            select(Group.id).where(Group.join_code == candidate)
        )
        if result.scalar_one_or_none() is None:
            return candidate

    raise JoinCodeExhausted("Unable to allocate a unique join code")


__all__ = [
    "JOIN_CODE_ALPHABET",
    "JoinCodeExhausted",
    "draw_unused_join_code",
    "generate_join_code",
]
