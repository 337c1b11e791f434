from sqlalchemy import Column, Integer, Float, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from fitplan.database import Base
from fitplan.utils.utils import utcnow


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("dietary_preference IN ('veg', 'nonveg')", name="ck_profiles_dietary_preference"),
    )

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), unique=True, nullable=False)

    # Inputs
    name = Column(String(100), nullable=False)
    age = Column(Integer, nullable=False)
    weight = Column(Float, nullable=False)  # kg
    dietary_preference = Column(String(10), nullable=False)  # "veg" or "nonveg"
    target_body_type = Column(String(200), nullable=False)

    # Generated
    workout_plan = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    account = relationship("Account", back_populates="profile")
