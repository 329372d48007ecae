from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, func
from mindfit.database import Base

class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    badge_type = Column(String, nullable=False)
    milestone_value = Column(Integer, nullable=True)
    earned_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "badge_type", name="uq_user_badge"),
    )
