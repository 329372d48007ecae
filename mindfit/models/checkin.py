from sqlalchemy import Column, Integer, Float, Text, DateTime, ForeignKey, JSON, UniqueConstraint, func
from mindfit.database import Base

class CheckIn(Base):
    __tablename__ = "weekly_updates"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    week_number = Column(Integer, nullable=False)
    weight = Column(Float, nullable=False)

    body_fat_percentage = Column(Float, nullable=True)
    neck_circumference = Column(Float, nullable=True)
    waist_circumference = Column(Float, nullable=True)
    hip_circumference = Column(Float, nullable=True)

    photo_paths = Column(JSON, nullable=False, default=list)  # front, side, back
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "week_number", name="uq_user_week"),
    )
