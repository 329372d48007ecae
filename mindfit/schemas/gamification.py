from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional

class BadgeResponse(BaseModel):
    badge_type: str
    name: str
    description: str
    icon: str
    rarity: str
    earned_at: Optional[datetime] = None

class XPResponse(BaseModel):
    total_xp: int
    current_level: int
    xp_to_next_level: int
    xp_in_current_level: int
    progress_percent: float
    level_title: str

class XPHistoryItem(BaseModel):
    action_type: str
    xp_gained: int
    description: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}

class AchievementsResponse(BaseModel):
    earned: List[BadgeResponse]
    available: List[BadgeResponse]
