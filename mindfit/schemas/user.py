from pydantic import BaseModel, EmailStr, Field
from typing import Optional

class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    password: str = Field(..., min_length=8, max_length=72)

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserResponse(BaseModel):
    id: int
    email: EmailStr
    is_active: bool
    name: str | None
    role: str

    model_config = {"from_attributes": True}

class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    user: UserResponse

class RefreshRequest(BaseModel):
    refresh_token: str

class ProfileResponse(UserResponse):
    sex: Optional[str] = None
    age: Optional[int] = None
    height: Optional[float] = None
    phone: Optional[str] = None
    goal_type: Optional[str] = None
    goal_subtype: Optional[str] = None
    initial_weight: Optional[float] = None
    target_weight: Optional[float] = None
    weekly_variation_percent: Optional[float] = None

class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=72)
