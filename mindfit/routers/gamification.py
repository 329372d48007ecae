from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mindfit.database import get_db
from mindfit.core.auth import get_current_user
from mindfit.models.xp import XPHistory
from mindfit.schemas.gamification import AchievementsResponse, BadgeResponse, XPHistoryItem, XPResponse
from mindfit.services.achievements import BADGE_CATALOG, BadgeType, get_earned_badges, parse_badge
from mindfit.services.xp import XPState, get_or_create_xp, level_title, xp_in_current_level, xp_progress_percent

router = APIRouter(tags=["gamification"])


def badge_response(badge: BadgeType, earned_at=None) -> BadgeResponse:
    info = BADGE_CATALOG[badge]
    return BadgeResponse(
        badge_type=badge.value,
        name=info.name,
        description=info.description,
        icon=info.icon,
        rarity=info.rarity.value,
        earned_at=earned_at
    )


def earned_badge_responses(rows) -> List[BadgeResponse]:
    """Earned rows as badges, skipping types that left the catalog."""
    responses = []
    for row in rows:
        badge = parse_badge(row.badge_type)
        if badge is not None:
            responses.append(badge_response(badge, row.earned_at))
    return responses


def xp_response(state: XPState) -> XPResponse:
    return XPResponse(
        total_xp=state.total_xp,
        current_level=state.current_level,
        xp_to_next_level=state.xp_to_next_level,
        xp_in_current_level=xp_in_current_level(state),
        progress_percent=round(xp_progress_percent(state), 1),
        level_title=level_title(state.current_level)
    )


async def load_xp_state(db: AsyncSession, user_id: int) -> XPState:
    row = await get_or_create_xp(db, user_id)
    await db.commit()
    return XPState(total_xp=row.total_xp, current_level=row.current_level)


@router.get("/xp", response_model=XPResponse)
async def get_my_xp(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return xp_response(await load_xp_state(db, current_user.id))


@router.get("/xp/history", response_model=List[XPHistoryItem])
async def get_my_xp_history(
    limit: int = 50,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(XPHistory)
        .where(XPHistory.user_id == current_user.id)
        .order_by(XPHistory.created_at.desc(), XPHistory.id.desc())
        .limit(min(max(limit, 1), 200))
    )
    return result.scalars().all()


@router.get("/achievements", response_model=AchievementsResponse)
async def get_my_achievements(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    earned_rows = await get_earned_badges(db, current_user.id)
    earned_types = {a.badge_type for a in earned_rows}
    return AchievementsResponse(
        earned=earned_badge_responses(earned_rows),
        available=[badge_response(b) for b in BadgeType if b.value not in earned_types]
    )


@router.get("/achievements/catalog", response_model=List[BadgeResponse])
async def get_badge_catalog():
    return [badge_response(b) for b in BadgeType]
