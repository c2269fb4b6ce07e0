"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.event import RegisterRequest, SubscribeRequest
from app.services.event_store import EventStore
from app.utils.responses import success_response, not_found_error

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.post("/users")
async def register_user(
    user_data: RegisterRequest,
    db: Session = Depends(get_db)
):
    """Register a chat caller; an existing user is left as is"""
    EventStore.ensure_user(db, user_data.caller_id, user_data.username)
    return success_response(
        message="User registered",
        data={"caller_id": user_data.caller_id}
    )

@router.get("/events")
async def list_upcoming_events(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """List upcoming public events, soonest first"""
    events = EventStore.list_upcoming_public(db, limit=limit)
    return success_response(
        message="Upcoming events retrieved",
        data=[event.model_dump() for event in events]
    )

@router.get("/events/{event_id}")
async def get_event(
    event_id: str,
    db: Session = Depends(get_db)
):
    """Get a single event"""
    event = EventStore.get_event(db, event_id)
    if not event:
        raise not_found_error("Event")

    return success_response(
        message="Event retrieved",
        data=event.model_dump(mode="json")
    )

@router.post("/events/{event_id}/subscriptions")
async def subscribe(
    event_id: str,
    subscription: SubscribeRequest,
    db: Session = Depends(get_db)
):
    """Subscribe a caller to an event; repeating the call is harmless"""
    if not EventStore.get_event(db, event_id):
        raise not_found_error("Event")

    EventStore.ensure_user(db, subscription.caller_id, subscription.username)
    EventStore.subscribe(db, subscription.caller_id, event_id)
    return success_response(
        message="Subscribed",
        data={"caller_id": subscription.caller_id, "event_id": event_id}
    )
