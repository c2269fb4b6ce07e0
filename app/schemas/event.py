"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

class EventCreationRequest(BaseModel):
    """Validated event submission, ready to be stored"""
    title: str
    start_at: str  # UTC ISO-8601 with a Z suffix
    duration_min: int
    meeting_url: str
    is_public: bool = True
    description: Optional[str] = None

class EventSummary(BaseModel):
    """Upcoming event as shown in listings"""
    id: str
    title: str
    start_at: str
    meeting_url: str

    class Config:
        from_attributes = True

class EventDetail(EventSummary):
    """Full event snapshot"""
    description: Optional[str] = None
    duration_min: int
    is_public: bool
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

class RegisterRequest(BaseModel):
    """Register a chat caller"""
    caller_id: int
    username: Optional[str] = None

class SubscribeRequest(BaseModel):
    """Subscribe a caller to an event"""
    caller_id: int
    username: Optional[str] = None
