from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from mindfit.database import get_db
from mindfit.core.auth import get_current_user
from mindfit.schemas.checkin import CheckInCreate, CheckInResult, CheckInWithZone
from mindfit.services.checkins import DuplicateCheckIn, submit_checkin
from mindfit.services.records import get_checkins, goal_from_user, to_weekly_updates
from mindfit.services.streaks import zone_history

router = APIRouter(prefix="/checkins", tags=["checkins"])


def require_goal(user):
    goal = goal_from_user(user)
    if goal is None:
        raise HTTPException(400, "Goal configuration missing, ask your mentor to set it up")
    return goal


@router.post("", response_model=CheckInResult)
async def create_checkin(
    checkin_in: CheckInCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    goal = require_goal(current_user)
    now = datetime.now(timezone.utc)

    try:
        outcome = await submit_checkin(db, current_user.id, goal, checkin_in.model_dump(), now)
    except DuplicateCheckIn as e:
        raise HTTPException(409, str(e))

    return CheckInResult(
        checkin=outcome.checkin,
        zone=outcome.zone.value,
        new_badges=[b.value for b in outcome.new_badges],
        xp_gained=outcome.xp_gained,
        total_xp=outcome.xp.total_xp,
        current_level=outcome.xp.current_level,
        leveled_up=outcome.leveled_up
    )


@router.get("", response_model=List[CheckInWithZone])
async def list_checkins(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    """
    Check-in history (oldest first) with the zone of each week.
    """
    goal = require_goal(current_user)
    rows = await get_checkins(db, current_user.id)
    zones = zone_history(to_weekly_updates(rows), goal)

    return [
        CheckInWithZone.from_row(row, zones[row.week_number].value)
        for row in rows
    ]
