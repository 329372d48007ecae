from sqlalchemy import Column, Integer, Float, Boolean, DateTime, ForeignKey, func, Date
from mindfit.database import Base

class IntermediateGoal(Base):
    __tablename__ = "intermediate_goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    target_weight = Column(Float, nullable=False)
    target_date = Column(Date, nullable=True)
    achieved = Column(Boolean, default=False)
    achieved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
