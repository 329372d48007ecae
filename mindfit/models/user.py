from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, func
from mindfit.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default="mentee")  # mentee, admin
    is_active = Column(Boolean, default=True)

    # Profile
    sex = Column(String, nullable=True)        # male, female
    age = Column(Integer, nullable=True)
    height = Column(Float, nullable=True)      # cm
    phone = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)

    # Goal configuration (initial_weight is locked once check-ins exist)
    goal_type = Column(String, nullable=True)  # weight_loss, muscle_gain
    goal_subtype = Column(String, nullable=True, default="standard")  # standard, moderate
    initial_weight = Column(Float, nullable=True)
    target_weight = Column(Float, nullable=True)
    weekly_variation_percent = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
