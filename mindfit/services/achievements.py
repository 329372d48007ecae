import enum
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mindfit.models.achievement import Achievement
from mindfit.services import streaks
from mindfit.services.progress import chronological, overall_progress_percent
from mindfit.services.zones import GoalConfiguration, WeeklyUpdate

logger = logging.getLogger(__name__)


class Rarity(str, enum.Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class BadgeType(str, enum.Enum):
    FIRST_CHECKIN = "first_checkin"
    CONSISTENCY_4WEEKS = "consistency_4weeks"
    CONSISTENCY_12WEEKS = "consistency_12weeks"
    CONSISTENCY_24WEEKS = "consistency_24weeks"
    WEIGHT_MILESTONE_5KG = "weight_milestone_5kg"
    WEIGHT_MILESTONE_10KG = "weight_milestone_10kg"
    PHOTO_CHAMPION = "photo_champion"
    GREEN_STREAK_3 = "green_streak_3"
    GREEN_STREAK_5 = "green_streak_5"
    GREEN_STREAK_10 = "green_streak_10"
    FIRST_GREEN = "first_green"
    DIAMOND_12 = "diamond_12"
    PERFECT_STREAK_4 = "perfect_streak_4"
    NO_RED_8 = "no_red_8"
    COMEBACK = "comeback"
    BODY_FAT_5PERCENT = "body_fat_5percent"
    HALFWAY_HERO = "halfway_hero"
    GOAL_ACHIEVED = "goal_achieved"


@dataclass(frozen=True)
class BadgeInfo:
    name: str
    description: str
    icon: str
    rarity: Rarity


BADGE_CATALOG: Dict[BadgeType, BadgeInfo] = {
    BadgeType.FIRST_CHECKIN: BadgeInfo("First Week", "Completed your first check-in", "🎯", Rarity.COMMON),
    BadgeType.CONSISTENCY_4WEEKS: BadgeInfo("Bronze Consistency", "4 consecutive weeks", "🥉", Rarity.COMMON),
    BadgeType.CONSISTENCY_12WEEKS: BadgeInfo("Silver Consistency", "12 consecutive weeks", "🥈", Rarity.RARE),
    BadgeType.CONSISTENCY_24WEEKS: BadgeInfo("Gold Consistency", "24 consecutive weeks", "🥇", Rarity.EPIC),
    BadgeType.WEIGHT_MILESTONE_5KG: BadgeInfo("5kg Milestone", "Lost or gained 5kg", "💪", Rarity.RARE),
    BadgeType.WEIGHT_MILESTONE_10KG: BadgeInfo("10kg Milestone", "Lost or gained 10kg", "🔥", Rarity.EPIC),
    BadgeType.PHOTO_CHAMPION: BadgeInfo("Photo Champion", "10 check-ins with photos", "📸", Rarity.RARE),
    BadgeType.GREEN_STREAK_3: BadgeInfo("Green Streak", "3 green weeks in a row", "🟢", Rarity.COMMON),
    BadgeType.GREEN_STREAK_5: BadgeInfo("Green Machine", "5 green weeks in a row", "💚", Rarity.RARE),
    BadgeType.GREEN_STREAK_10: BadgeInfo("Unstoppable", "10 green weeks in a row", "🌿", Rarity.EPIC),
    BadgeType.FIRST_GREEN: BadgeInfo("Into the Green", "First week in the green zone", "✅", Rarity.COMMON),
    BadgeType.DIAMOND_12: BadgeInfo("Diamond", "12 weeks in the green zone", "💎", Rarity.LEGENDARY),
    BadgeType.PERFECT_STREAK_4: BadgeInfo("Perfect Month", "4 check-ins without missing a week", "⭐", Rarity.RARE),
    BadgeType.NO_RED_8: BadgeInfo("Steady Hand", "8 weeks without a red zone", "🛡️", Rarity.EPIC),
    BadgeType.COMEBACK: BadgeInfo("Comeback", "Back to green after two red weeks", "🔄", Rarity.EPIC),
    BadgeType.BODY_FAT_5PERCENT: BadgeInfo("Body Fat -5%", "Reduced body fat by 5 points", "📉", Rarity.RARE),
    BadgeType.HALFWAY_HERO: BadgeInfo("Halfway Hero", "Reached 50% of the goal", "🏅", Rarity.RARE),
    BadgeType.GOAL_ACHIEVED: BadgeInfo("Goal Achieved!", "Reached the final goal", "🏆", Rarity.LEGENDARY),
}


@dataclass(frozen=True)
class HistorySnapshot:
    """Everything the badge predicates look at, computed once per evaluation."""
    update_count: int
    week_streak: int
    green_streak: int
    no_red_streak: int
    green_weeks: int
    milestone_delta: float
    photo_count: int
    comeback: bool
    body_fat_drop: float
    progress_percent: float


def _body_fat_drop(updates: Sequence[WeeklyUpdate]) -> float:
    readings = [u.body_fat_percentage for u in chronological(updates) if u.body_fat_percentage is not None]
    if len(readings) < 2:
        return 0.0
    return readings[0] - readings[-1]


def build_snapshot(updates: Sequence[WeeklyUpdate], goal: GoalConfiguration) -> HistorySnapshot:
    progress = 0.0
    if updates:
        current = streaks.most_recent_first(updates)[0].weight
        progress = overall_progress_percent(goal.initial_weight, current, goal.target_weight, goal.goal_type)

    return HistorySnapshot(
        update_count=len(updates),
        week_streak=streaks.consecutive_week_streak(updates),
        green_streak=streaks.consecutive_green_streak(updates, goal),
        no_red_streak=streaks.no_red_streak(updates, goal),
        green_weeks=streaks.total_green_weeks(updates, goal),
        milestone_delta=streaks.weight_milestone_delta(updates, goal),
        photo_count=streaks.photo_completion_count(updates),
        comeback=streaks.has_comeback(updates, goal),
        body_fat_drop=_body_fat_drop(updates),
        progress_percent=progress,
    )


BADGE_RULES: Dict[BadgeType, Callable[[HistorySnapshot], bool]] = {
    BadgeType.FIRST_CHECKIN: lambda s: s.update_count == 1,
    BadgeType.CONSISTENCY_4WEEKS: lambda s: s.week_streak >= 4,
    BadgeType.CONSISTENCY_12WEEKS: lambda s: s.week_streak >= 12,
    BadgeType.CONSISTENCY_24WEEKS: lambda s: s.week_streak >= 24,
    BadgeType.WEIGHT_MILESTONE_5KG: lambda s: s.milestone_delta >= 5,
    BadgeType.WEIGHT_MILESTONE_10KG: lambda s: s.milestone_delta >= 10,
    BadgeType.PHOTO_CHAMPION: lambda s: s.photo_count >= 10,
    BadgeType.GREEN_STREAK_3: lambda s: s.green_streak >= 3,
    BadgeType.GREEN_STREAK_5: lambda s: s.green_streak >= 5,
    BadgeType.GREEN_STREAK_10: lambda s: s.green_streak >= 10,
    BadgeType.FIRST_GREEN: lambda s: s.green_weeks >= 1,
    BadgeType.DIAMOND_12: lambda s: s.green_weeks >= 12,
    BadgeType.PERFECT_STREAK_4: lambda s: s.week_streak >= 4,
    BadgeType.NO_RED_8: lambda s: s.no_red_streak >= 8,
    BadgeType.COMEBACK: lambda s: s.comeback,
    BadgeType.BODY_FAT_5PERCENT: lambda s: s.body_fat_drop >= 5,
    BadgeType.HALFWAY_HERO: lambda s: s.progress_percent >= 50,
    BadgeType.GOAL_ACHIEVED: lambda s: s.progress_percent >= 100,
}


def parse_badge(value: str) -> Optional[BadgeType]:
    """The badge stored as `value`, or None when it is no longer in the catalog."""
    try:
        return BadgeType(value)
    except ValueError:
        return None


def evaluate(
    updates: Sequence[WeeklyUpdate],
    goal: GoalConfiguration,
    already_earned: Iterable[str] = (),
) -> List[BadgeType]:
    """Badges whose predicate holds for this history and that are not yet earned, in catalog order."""
    earned = {parse_badge(b) for b in already_earned}
    snapshot = build_snapshot(updates, goal)
    return [
        badge for badge in BadgeType
        if badge not in earned and BADGE_RULES[badge](snapshot)
    ]


async def get_earned_badges(db: AsyncSession, user_id: int) -> List[Achievement]:
    result = await db.execute(
        select(Achievement)
        .where(Achievement.user_id == user_id)
        .order_by(Achievement.earned_at.desc())
    )
    return list(result.scalars().all())


async def award_achievements(
    db: AsyncSession,
    user_id: int,
    goal: GoalConfiguration,
    updates: Sequence[WeeklyUpdate],
) -> List[BadgeType]:
    """
    Persist the badges newly earned by this history.

    Rows are unique per (user, badge); when a concurrent request inserts the
    same badge first, the flush fails, we roll back to the savepoint and
    report only what is actually new.
    """
    existing = {a.badge_type for a in await get_earned_badges(db, user_id)}
    awarded = []
    for badge in evaluate(updates, goal, existing):
        milestone = None
        if badge == BadgeType.WEIGHT_MILESTONE_5KG:
            milestone = 5
        elif badge == BadgeType.WEIGHT_MILESTONE_10KG:
            milestone = 10
        try:
            async with db.begin_nested():
                db.add(Achievement(user_id=user_id, badge_type=badge.value, milestone_value=milestone))
        except IntegrityError:
            logger.warning("Badge %s already awarded to user %s", badge.value, user_id)
            continue
        awarded.append(badge)

    if awarded:
        logger.info("User %s earned badges: %s", user_id, ", ".join(b.value for b in awarded))
    return awarded
