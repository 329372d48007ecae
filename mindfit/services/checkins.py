import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mindfit.models.checkin import CheckIn
from mindfit.services import streaks
from mindfit.services.achievements import BADGE_CATALOG, BadgeType, award_achievements
from mindfit.services.records import get_checkins, to_weekly_updates
from mindfit.services.xp import XPAction, XPState, add_xp, get_or_create_xp
from mindfit.services.zones import GoalConfiguration, Zone

logger = logging.getLogger(__name__)

GREEN_STREAK_BONUS_FROM = 3


class DuplicateCheckIn(Exception):
    """Another check-in claimed the same week number first."""


@dataclass
class CheckInOutcome:
    checkin: CheckIn
    zone: Zone
    new_badges: List[BadgeType] = field(default_factory=list)
    xp_gained: int = 0
    xp: XPState = field(default_factory=XPState)
    leveled_up: bool = False


async def submit_checkin(
    db: AsyncSession,
    user_id: int,
    goal: GoalConfiguration,
    data: dict,
    now: datetime,
) -> CheckInOutcome:
    """
    Store a weekly check-in and apply its rewards in one transaction.

    The week number is the count of previous check-ins plus one.
    Green-zone bonuses start from the second check-in.
    """
    rows = await get_checkins(db, user_id)
    checkin = CheckIn(
        user_id=user_id,
        week_number=len(rows) + 1,
        weight=data["weight"],
        body_fat_percentage=data.get("body_fat_percentage"),
        neck_circumference=data.get("neck_circumference"),
        waist_circumference=data.get("waist_circumference"),
        hip_circumference=data.get("hip_circumference"),
        photo_paths=[p for p in data.get("photo_paths") or [] if p],
        notes=data.get("notes"),
        created_at=now,
    )
    db.add(checkin)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateCheckIn(f"week {checkin.week_number} already recorded") from e

    updates = to_weekly_updates(rows + [checkin])
    zone = streaks.zone_history(updates, goal)[checkin.week_number]

    xp_before = (await get_or_create_xp(db, user_id)).total_xp
    actions = [XPAction.CHECKIN]
    if checkin.photo_paths:
        actions.append(XPAction.PHOTO_BONUS)
    # the first week is green by default and earns no zone bonus
    if zone == Zone.GREEN and rows:
        actions += [XPAction.GREEN_ZONE, XPAction.PERFECT_WEEK]
        if streaks.consecutive_green_streak(updates, goal) >= GREEN_STREAK_BONUS_FROM:
            actions.append(XPAction.GREEN_STREAK)

    leveled_up = False
    state = XPState()
    for action in actions:
        state, up = await add_xp(db, user_id, action)
        leveled_up = leveled_up or up

    new_badges = await award_achievements(db, user_id, goal, updates)
    for badge in new_badges:
        state, up = await add_xp(db, user_id, XPAction.BADGE, f"Badge unlocked: {BADGE_CATALOG[badge].name}")
        leveled_up = leveled_up or up

    await db.commit()
    logger.info("User %s checked in week %s (%s)", user_id, checkin.week_number, zone.value)

    return CheckInOutcome(
        checkin=checkin,
        zone=zone,
        new_badges=new_badges,
        xp_gained=state.total_xp - xp_before,
        xp=state,
        leveled_up=leveled_up,
    )
