from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional

class IntermediateGoalCreate(BaseModel):
    target_weight: float = Field(..., gt=0, lt=500)
    target_date: Optional[date] = None

class IntermediateGoalResponse(BaseModel):
    id: int
    target_weight: float
    target_date: Optional[date]
    achieved: bool
    achieved_at: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}
