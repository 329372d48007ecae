from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mindfit.database import get_db
from mindfit.core.auth import get_current_user
from mindfit.routers.checkins import require_goal
from mindfit.schemas.admin import InsightsResponse
from mindfit.schemas.insights import ChatRequest
from mindfit.services.insights import InsightClient, InsightsUnavailable, get_insight_client
from mindfit.services.records import get_checkins, to_weekly_updates

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("/progress", response_model=InsightsResponse)
async def progress_insights(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
    client: InsightClient = Depends(get_insight_client)
):
    """
    AI commentary on the mentee's recent check-ins.

    Reports available=False when the insight service can't be reached.
    """
    goal = require_goal(current_user)
    updates = to_weekly_updates(await get_checkins(db, current_user.id))
    try:
        text = await client.progress_insights(current_user.name or current_user.email, goal, updates)
    except InsightsUnavailable:
        return InsightsResponse(available=False, insights=None)
    return InsightsResponse(available=True, insights=text)


@router.post("/chat", response_model=InsightsResponse)
async def coach_chat(
    chat_in: ChatRequest,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
    client: InsightClient = Depends(get_insight_client)
):
    """Next coach reply for the conversation, which the client keeps and resends in full."""
    goal = require_goal(current_user)
    updates = to_weekly_updates(await get_checkins(db, current_user.id))
    messages = [m.model_dump() for m in chat_in.messages]
    try:
        text = await client.coach_reply(current_user.name or current_user.email, goal, updates, messages)
    except InsightsUnavailable:
        return InsightsResponse(available=False, insights=None)
    return InsightsResponse(available=True, insights=text)
