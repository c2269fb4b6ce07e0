"""
Subscription model
"""

from datetime import datetime
from sqlalchemy import Column, BigInteger, String, DateTime, ForeignKey

from app.core.db import Base

class Subscription(Base):
    __tablename__ = "subscriptions"

    user_id = Column(BigInteger, ForeignKey("users.id"), primary_key=True)
    event_id = Column(String(32), ForeignKey("events.id"), primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
