"""Analytics, dashboard counters and grade export."""

from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Query, Response

from classroom.controllers.dependencies import ActorDep, SessionDep, TeacherDep
from classroom.domain.actors import TeacherContext
from classroom.exceptions import ValidationFailed
from classroom.services.access import ensure_owner, load_group
from classroom.services.analytics import analytics_for, export_group_csv, teacher_stats
from classroom.views import AnalyticsResponse, StatsResponse

router = APIRouter(prefix="/api", tags=["analytics"])

logger = logging.getLogger(__name__)


def _csv_filename(group_name: str) -> str:
    # Header values must stay latin-1 encodable.
    safe = "".join(
        ch for ch in group_name if ch.isascii() and (ch.isalnum() or ch in " -_")
    ).strip()
    return f"{safe or 'group'}-grades.csv"


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    actor: ActorDep,
    session: SessionDep,
) -> AnalyticsResponse:
    """Teachers get totals over owned groups; students over their own work."""

    return await analytics_for(session, actor)


@router.get("/analytics/export-csv")
async def export_csv(
    teacher: TeacherDep,
    session: SessionDep,
    groupId: Annotated[Optional[int], Query()] = None,
) -> Response:
    if groupId is None:
        raise ValidationFailed("groupId is required")

    group = await load_group(session, groupId)
    ensure_owner(group, teacher)

    content = await export_group_csv(session, group)
    logger.info("Teacher %s exported grades of group %s", teacher.user_id, group.id)
    return Response(
        content=content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{_csv_filename(group.name)}"'
        },
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    actor: ActorDep,
    session: SessionDep,
) -> StatsResponse:
    if not isinstance(actor, TeacherContext):
        return StatsResponse()
    return await teacher_stats(session, actor.user_id)
