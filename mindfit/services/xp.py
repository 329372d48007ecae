import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mindfit.models.xp import UserXP, XPHistory

logger = logging.getLogger(__name__)


class XPAction(str, enum.Enum):
    CHECKIN = "checkin"
    GREEN_ZONE = "green_zone"
    GREEN_STREAK = "green_streak"
    BADGE = "badge"
    INTERMEDIATE_GOAL = "intermediate_goal"
    PHOTO_BONUS = "photo_bonus"
    PERFECT_WEEK = "perfect_week"


XP_REWARDS = {
    XPAction.CHECKIN: 50,
    XPAction.GREEN_ZONE: 100,
    XPAction.GREEN_STREAK: 150,
    XPAction.BADGE: 200,
    XPAction.INTERMEDIATE_GOAL: 300,
    XPAction.PHOTO_BONUS: 25,
    XPAction.PERFECT_WEEK: 200,
}

ACTION_DESCRIPTIONS = {
    XPAction.CHECKIN: "Weekly check-in completed",
    XPAction.GREEN_ZONE: "Green zone reached",
    XPAction.GREEN_STREAK: "Green streak kept",
    XPAction.BADGE: "New achievement unlocked",
    XPAction.INTERMEDIATE_GOAL: "Intermediate goal reached",
    XPAction.PHOTO_BONUS: "Photos sent with the check-in",
    XPAction.PERFECT_WEEK: "Perfect week completed",
}


@dataclass(frozen=True)
class XPState:
    total_xp: int = 0
    current_level: int = 1

    @property
    def xp_to_next_level(self) -> int:
        return level_cost(self.current_level)


def level_cost(level: int) -> int:
    """XP needed to clear a level."""
    if level <= 5:
        return 500
    if level <= 10:
        return 750
    if level <= 20:
        return 1000
    return 1500


def level_for_total(total_xp: int) -> int:
    # costs change at 5/10/20, so consume tier by tier instead of dividing
    remaining = total_xp
    level = 1
    while remaining >= level_cost(level):
        remaining -= level_cost(level)
        level += 1
    return level


def xp_below_level(level: int) -> int:
    return sum(level_cost(i) for i in range(1, level))


def level_title(level: int) -> str:
    if level <= 5:
        return "Beginner"
    if level <= 10:
        return "Intermediate"
    if level <= 20:
        return "Advanced"
    return "Master"


def grant(state: XPState, action: XPAction, amount: Optional[int] = None) -> Tuple[XPState, bool]:
    if amount is None:
        amount = XP_REWARDS[XPAction(action)]
    new_total = state.total_xp + max(0, int(amount))
    new_level = max(state.current_level, level_for_total(new_total))
    return XPState(total_xp=new_total, current_level=new_level), new_level > state.current_level


def xp_in_current_level(state: XPState) -> int:
    return state.total_xp - xp_below_level(state.current_level)


def xp_progress_percent(state: XPState) -> float:
    percent = xp_in_current_level(state) / level_cost(state.current_level) * 100
    return max(0.0, min(percent, 100.0))


async def get_or_create_xp(db: AsyncSession, user_id: int) -> UserXP:
    result = await db.execute(select(UserXP).where(UserXP.user_id == user_id))
    row = result.scalar_one_or_none()
    if row is None:
        row = UserXP(user_id=user_id, total_xp=0, current_level=1, xp_to_next_level=level_cost(1))
        db.add(row)
        await db.flush()
    return row


async def add_xp(
    db: AsyncSession,
    user_id: int,
    action: XPAction,
    description: Optional[str] = None,
) -> Tuple[XPState, bool]:
    """Apply a grant to the stored XP row and log it in the history. Caller commits."""
    row = await get_or_create_xp(db, user_id)
    state, leveled_up = grant(XPState(row.total_xp, row.current_level), action)
    gained = state.total_xp - row.total_xp

    row.total_xp = state.total_xp
    row.current_level = state.current_level
    row.xp_to_next_level = state.xp_to_next_level
    db.add(XPHistory(
        user_id=user_id,
        action_type=XPAction(action).value,
        xp_gained=gained,
        description=description or ACTION_DESCRIPTIONS[XPAction(action)],
    ))

    if leveled_up:
        logger.info("User %s reached level %s", user_id, state.current_level)
    return state, leveled_up
