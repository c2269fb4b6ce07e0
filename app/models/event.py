"""
Event model
"""

from datetime import datetime
from sqlalchemy import Column, BigInteger, Integer, String, Boolean, DateTime, Index

from app.core.db import Base

class Event(Base):
    __tablename__ = "events"

    id = Column(String(32), primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(String, nullable=True)
    start_at = Column(String(30), nullable=False)  # UTC ISO-8601, e.g. 2025-12-15T19:00:00.000Z
    duration_min = Column(Integer, nullable=False)
    meeting_url = Column(String(2048), nullable=False)
    is_public = Column(Boolean, nullable=False, default=True)
    created_by = Column(BigInteger, nullable=True)  # chat id of the creator, not a foreign key
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_events_public_start", "is_public", "start_at"),
    )
