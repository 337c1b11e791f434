from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from fitplan.database import Base
from fitplan.utils.utils import utcnow


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(200), unique=True, nullable=False)
    password_hash = Column(String(200), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    profile = relationship(
        "Profile", back_populates="account", uselist=False,
        cascade="all, delete-orphan", passive_deletes=True,
    )
    sessions = relationship(
        "SessionRecord", back_populates="account",
        cascade="all, delete-orphan", passive_deletes=True,
    )
