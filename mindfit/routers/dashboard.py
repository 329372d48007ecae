from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mindfit.database import get_db
from mindfit.core.auth import get_current_user
from mindfit.routers.checkins import require_goal
from mindfit.schemas.progress import (
    DashboardResponse, PatternResponse, PredictionResponse,
    ProgressSummary, ProjectionResponse, WeekBandResponse
)
from mindfit.services import streaks
from mindfit.services.patterns import detect_patterns
from mindfit.services.progress import estimate_completion, weight_change_summary
from mindfit.services.projection import project_24_weeks
from mindfit.services.records import get_checkins, to_weekly_updates
from mindfit.services.zones import Zone, classify_week

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def projection_response(goal, updates) -> ProjectionResponse:
    bands = goal.bands
    return ProjectionResponse(
        initial_weight=goal.initial_weight,
        goal_type=goal.goal_type.value,
        goal_subtype=goal.goal_subtype.value,
        yellow_min=bands.yellow_min,
        green_min=bands.green_min,
        green_max=bands.green_max,
        weeks=[WeekBandResponse(**week.display()) for week in project_24_weeks(goal, updates)]
    )


def current_zone(updates, goal) -> Zone:
    ordered = streaks.most_recent_first(updates)
    if len(ordered) < 2:
        return Zone.GREEN
    return classify_week(ordered[0].weight, ordered[1].weight, goal)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    goal = require_goal(current_user)
    updates = to_weekly_updates(await get_checkins(db, current_user.id))
    today = datetime.now(timezone.utc).date()

    # 1. Progress summary
    change = weight_change_summary(updates, goal)
    summary = ProgressSummary(
        initial_weight=goal.initial_weight,
        target_weight=goal.target_weight,
        current_weight=change.current_weight,
        total_change=round(change.total_change, 2),
        last_change=round(change.last_change, 2) if change.last_change is not None else None,
        progress_percent=round(change.progress_percent, 1),
        current_zone=current_zone(updates, goal).value,
        week_streak=streaks.consecutive_week_streak(updates),
        green_streak=streaks.consecutive_green_streak(updates, goal)
    )

    # 2. Goal prediction (needs two check-ins to have a pace)
    prediction = None
    if len(updates) >= 2:
        estimate = estimate_completion(updates, goal, today)
        prediction = PredictionResponse(**asdict(estimate))

    # 3. Patterns
    patterns = [PatternResponse(**asdict(p)) for p in detect_patterns(updates, goal)]

    return DashboardResponse(summary=summary, prediction=prediction, patterns=patterns)


@router.get("/projection", response_model=ProjectionResponse)
async def get_projection(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    goal = require_goal(current_user)
    updates = to_weekly_updates(await get_checkins(db, current_user.id))
    return projection_response(goal, updates)
