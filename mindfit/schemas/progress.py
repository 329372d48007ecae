from pydantic import BaseModel
from datetime import date
from typing import List, Optional

class WeekBandResponse(BaseModel):
    week_number: int
    lower_bound: float
    ideal_target: float
    upper_bound: float
    actual_weight: Optional[float]
    zone: Optional[str]

class ProjectionResponse(BaseModel):
    initial_weight: float
    goal_type: str
    goal_subtype: str
    yellow_min: float
    green_min: float
    green_max: float
    weeks: List[WeekBandResponse]

class PredictionResponse(BaseModel):
    weeks_remaining: int
    estimated_date: date
    is_on_track: bool
    avg_weekly_change: float
    velocity_weeks: Optional[int]

class PatternResponse(BaseModel):
    kind: str
    severity: str
    title: str
    description: str
    action: str

class ProgressSummary(BaseModel):
    initial_weight: float
    target_weight: float
    current_weight: float
    total_change: float
    last_change: Optional[float]
    progress_percent: float
    current_zone: str
    week_streak: int
    green_streak: int

class DashboardResponse(BaseModel):
    summary: ProgressSummary
    prediction: Optional[PredictionResponse]
    patterns: List[PatternResponse]
