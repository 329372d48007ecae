from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mindfit.database import get_db
from mindfit.core.auth import get_current_user
from mindfit.models.goal import IntermediateGoal
from mindfit.schemas.goal import IntermediateGoalCreate, IntermediateGoalResponse
from mindfit.services.xp import XPAction, add_xp

router = APIRouter(prefix="/goals", tags=["goals"])

MAX_ACTIVE_GOALS = 5


async def get_own_goal(db: AsyncSession, goal_id: int, user_id: int) -> IntermediateGoal:
    result = await db.execute(
        select(IntermediateGoal).where(IntermediateGoal.id == goal_id, IntermediateGoal.user_id == user_id)
    )
    goal = result.scalar_one_or_none()
    if not goal:
        raise HTTPException(404, "Goal not found")
    return goal


@router.get("", response_model=List[IntermediateGoalResponse])
async def list_goals(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(IntermediateGoal)
        .where(IntermediateGoal.user_id == current_user.id)
        .order_by(IntermediateGoal.target_weight)
    )
    return result.scalars().all()


@router.post("", response_model=IntermediateGoalResponse)
async def create_goal(
    goal_in: IntermediateGoalCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(IntermediateGoal)
        .where(IntermediateGoal.user_id == current_user.id)
        .where(IntermediateGoal.achieved.is_(False))
    )
    if len(result.scalars().all()) >= MAX_ACTIVE_GOALS:
        raise HTTPException(400, f"At most {MAX_ACTIVE_GOALS} active goals allowed")

    goal = IntermediateGoal(
        user_id=current_user.id,
        target_weight=goal_in.target_weight,
        target_date=goal_in.target_date,
        achieved=False,
        created_at=datetime.now(timezone.utc)
    )
    db.add(goal)
    await db.commit()
    return goal


@router.post("/{goal_id}/achieve", response_model=IntermediateGoalResponse)
async def achieve_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    goal = await get_own_goal(db, goal_id, current_user.id)
    if goal.achieved:
        raise HTTPException(400, "Goal already achieved")

    goal.achieved = True
    goal.achieved_at = datetime.now(timezone.utc)
    await add_xp(db, current_user.id, XPAction.INTERMEDIATE_GOAL,
                 f"Intermediate goal of {goal.target_weight:.1f} kg reached")
    await db.commit()
    return goal


@router.delete("/{goal_id}")
async def delete_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    goal = await get_own_goal(db, goal_id, current_user.id)
    await db.delete(goal)
    await db.commit()
    return {"message": "Goal deleted"}
