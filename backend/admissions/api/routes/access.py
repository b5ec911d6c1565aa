"""
Access Routes

Route guard decisions for front ends deciding whether to render an area.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_correlation_id_dep, get_current_subject_dep, get_route_guard
from ...domain.models import GuardDecision, Subject
from ...engine.route_guard import RouteGuard

router = APIRouter(dependencies=[Depends(get_correlation_id_dep)])


@router.get("/guard", response_model=GuardDecision)
async def guard_area(
    area: str = Query(..., min_length=1, description="Requested area, e.g. /billing"),
    subject: Optional[Subject] = Depends(get_current_subject_dep),
    guard: RouteGuard = Depends(get_route_guard)
):
    """
    Decide whether the calling subject may open an area.

    Anonymous callers are sent to sign-in with the area kept in resume_to;
    others are either allowed or redirected to their home area.
    """
    return guard.guard(subject, area)
