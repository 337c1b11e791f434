from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from fitplan.database import Base
from fitplan.utils.utils import utcnow


class SessionRecord(Base):
    """Server-side login session, looked up by the cookie token."""
    __tablename__ = "sessions"

    token = Column(String(64), primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    username = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)

    account = relationship("Account", back_populates="sessions")
