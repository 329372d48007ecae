from pydantic import BaseModel, EmailStr, Field, model_validator
from datetime import datetime
from typing import List, Optional
from .checkin import CheckInWithZone
from .gamification import BadgeResponse, XPResponse
from .progress import ProjectionResponse


class GoalSettings(BaseModel):
    goal_type: str = Field(..., pattern="^(weight_loss|muscle_gain)$")
    goal_subtype: str = Field("standard", pattern="^(standard|moderate)$")
    initial_weight: float = Field(..., gt=0, lt=500)
    target_weight: float = Field(..., gt=0, lt=500)
    weekly_variation_percent: Optional[float] = Field(None, gt=0, le=5)

    @model_validator(mode="after")
    def check_direction(self):
        if self.goal_type == "weight_loss" and self.target_weight >= self.initial_weight:
            raise ValueError("target_weight must be below initial_weight for weight loss")
        if self.goal_type == "muscle_gain" and self.target_weight <= self.initial_weight:
            raise ValueError("target_weight must be above initial_weight for muscle gain")
        return self

class MenteeCreate(GoalSettings):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    password: str = Field(..., min_length=8, max_length=72)
    sex: Optional[str] = Field(None, pattern="^(male|female)$")
    age: Optional[int] = Field(None, gt=0, lt=120)
    height: Optional[float] = Field(None, gt=0, lt=260)
    phone: Optional[str] = None

class MenteeStatusResponse(BaseModel):
    status: str
    current_zone: str
    days_since_last_update: int
    needs_attention: bool
    attention_reasons: List[str]

class RosterItem(BaseModel):
    id: int
    name: Optional[str]
    email: str
    goal_type: Optional[str]
    current_weight: Optional[float]
    progress_percent: float
    checkin_count: int
    tags: List[str]
    status: MenteeStatusResponse

class GlobalStatsResponse(BaseModel):
    total_mentees: int
    active_mentees: int
    inactive_mentees: int
    green_zone: int
    yellow_zone: int
    red_zone: int
    needs_attention: int
    average_progress: float
    weight_loss_count: int
    muscle_gain_count: int

class AlertResponse(BaseModel):
    mentee_id: int
    mentee_name: str
    priority: str
    message: str

class ZoneTimelineItem(BaseModel):
    week_number: int
    zone: str
    weight: float
    created_at: datetime

class MenteeDetailResponse(BaseModel):
    id: int
    name: Optional[str]
    email: str
    goal: Optional[GoalSettings]
    status: MenteeStatusResponse
    updates: List[CheckInWithZone]
    zone_timeline: List[ZoneTimelineItem]
    projection: Optional[ProjectionResponse]
    badges: List[BadgeResponse]
    xp: XPResponse

class NoteCreate(BaseModel):
    note: str = Field(..., min_length=1, max_length=5000)
    is_private: bool = True

class NoteResponse(BaseModel):
    id: int
    admin_id: int
    mentee_id: int
    note: str
    is_private: bool
    created_at: datetime

    model_config = {"from_attributes": True}

class TagCreate(BaseModel):
    tag_name: str = Field(..., min_length=1, max_length=40)
    tag_color: Optional[str] = Field("#3b82f6", pattern="^#[0-9a-fA-F]{6}$")

class TagResponse(BaseModel):
    id: int
    mentee_id: int
    tag_name: str
    tag_color: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}

class InsightsResponse(BaseModel):
    available: bool
    insights: Optional[str]
