from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

class CheckInCreate(BaseModel):
    weight: float = Field(..., gt=0, lt=500)
    body_fat_percentage: Optional[float] = Field(None, ge=0, le=80)
    neck_circumference: Optional[float] = Field(None, gt=0)
    waist_circumference: Optional[float] = Field(None, gt=0)
    hip_circumference: Optional[float] = Field(None, gt=0)
    photo_paths: List[str] = Field(default_factory=list, max_length=3)  # front, side, back
    notes: Optional[str] = Field(None, max_length=2000)

class CheckInResponse(BaseModel):
    id: int
    week_number: int
    weight: float
    body_fat_percentage: Optional[float]
    neck_circumference: Optional[float]
    waist_circumference: Optional[float]
    hip_circumference: Optional[float]
    photo_paths: List[str]
    notes: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}

class CheckInWithZone(CheckInResponse):
    zone: str

    @classmethod
    def from_row(cls, row, zone: str):
        return cls(**CheckInResponse.model_validate(row).model_dump(), zone=zone)

class CheckInResult(BaseModel):
    checkin: CheckInResponse
    zone: str
    new_badges: List[str]
    xp_gained: int
    total_xp: int
    current_level: int
    leveled_up: bool
