from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mindfit.models.checkin import CheckIn
from mindfit.models.user import User
from mindfit.services.zones import GoalConfiguration, GoalSubtype, GoalType, WeeklyUpdate


def goal_from_user(user: User) -> Optional[GoalConfiguration]:
    """None until the mentee has a complete goal configuration."""
    if not user.goal_type or user.initial_weight is None or user.target_weight is None:
        return None
    return GoalConfiguration(
        goal_type=GoalType(user.goal_type),
        goal_subtype=GoalSubtype(user.goal_subtype or GoalSubtype.STANDARD.value),
        initial_weight=user.initial_weight,
        target_weight=user.target_weight,
        weekly_variation_percent=user.weekly_variation_percent,
    )


def to_weekly_update(row: CheckIn) -> WeeklyUpdate:
    return WeeklyUpdate(
        week_number=row.week_number,
        weight=row.weight,
        created_at=row.created_at,
        body_fat_percentage=row.body_fat_percentage,
        neck_circumference=row.neck_circumference,
        waist_circumference=row.waist_circumference,
        hip_circumference=row.hip_circumference,
        photo_paths=list(row.photo_paths or []),
        notes=row.notes or "",
    )


def to_weekly_updates(rows: Sequence[CheckIn]) -> List[WeeklyUpdate]:
    return [to_weekly_update(r) for r in rows]


async def get_checkins(db: AsyncSession, user_id: int) -> List[CheckIn]:
    result = await db.execute(
        select(CheckIn)
        .where(CheckIn.user_id == user_id)
        .order_by(CheckIn.week_number)
    )
    return list(result.scalars().all())
