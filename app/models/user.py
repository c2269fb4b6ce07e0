"""
User model
"""

from datetime import datetime
from sqlalchemy import Column, BigInteger, String, Boolean, DateTime

from app.core.config import settings
from app.core.db import Base

class User(Base):
    __tablename__ = "users"

    id = Column(BigInteger, primary_key=True, autoincrement=False)  # chat platform user id
    username = Column(String(255), nullable=True)
    tz = Column(String(64), default=settings.DEFAULT_USER_TIMEZONE)
    email = Column(String(255), nullable=True)
    email_verified = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
