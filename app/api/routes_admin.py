"""
Admin API routes - requires authentication
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.services.event_store import EventStore
from app.utils.security import verify_admin_token
from app.utils.responses import success_response, not_found_error

router = APIRouter()

@router.post("/events/{event_id}/cancel")
async def cancel_event(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Soft delete an event"""
    if not EventStore.cancel_event(db, event_id):
        raise not_found_error("Event")

    return success_response(
        message="Event cancelled successfully",
        data={"cancelled_event_id": event_id}
    )

@router.get("/events/{event_id}/subscriptions")
async def count_subscriptions(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Number of subscribers of an event"""
    if not EventStore.get_event(db, event_id):
        raise not_found_error("Event")

    return success_response(
        message="Subscriptions counted",
        data={"event_id": event_id, "subscriptions": EventStore.count_subscriptions(db, event_id)}
    )
