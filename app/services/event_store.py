"""
Event store: events, users and subscriptions.

Read operations hand back Pydantic snapshots, never live ORM rows.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from app.models import Event, Subscription, User
from app.schemas.event import EventCreationRequest, EventDetail, EventSummary
from app.services.time_normalizer import TimeNormalizer

logger = logging.getLogger(__name__)


def _insert_ignore(db: Session, model, **values) -> None:
    """Single-statement insert that silently skips an existing primary key."""
    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        stmt = sqlite_insert(model).values(**values).on_conflict_do_nothing()
    elif dialect == "postgresql":
        stmt = pg_insert(model).values(**values).on_conflict_do_nothing()
    else:
        stmt = insert(model).values(**values).prefix_with("IGNORE")
    db.execute(stmt)
    db.commit()


def _active_events(db: Session):
    return db.query(Event).filter(Event.cancelled_at.is_(None))


class EventStore:
    @staticmethod
    def new_event_id() -> str:
        return secrets.token_urlsafe(16)

    @staticmethod
    def create_event(db: Session, request: EventCreationRequest, creator_id: Optional[int] = None) -> str:
        event_id = EventStore.new_event_id()
        # Cancelled rows are never removed, so an id seen once stays taken.
        while db.query(Event.id).filter(Event.id == event_id).first():
            event_id = EventStore.new_event_id()

        event = Event(
            id=event_id,
            title=request.title,
            description=request.description,
            start_at=request.start_at,
            duration_min=request.duration_min,
            meeting_url=request.meeting_url,
            is_public=request.is_public,
            created_by=creator_id,
        )
        db.add(event)
        db.commit()
        logger.info(f"Created event {event_id} '{request.title}' starting {request.start_at}")
        return event_id

    @staticmethod
    def get_event(db: Session, event_id: str) -> Optional[EventDetail]:
        """Return the event, or None when it is unknown or cancelled."""
        event = _active_events(db).filter(Event.id == event_id).first()
        return EventDetail.model_validate(event) if event else None

    @staticmethod
    def list_upcoming_public(db: Session, limit: int = 5, now: Optional[str] = None) -> List[EventSummary]:
        """Public, non-cancelled events starting at or after ``now``, soonest first.

        ``start_at`` values share one fixed-width UTC format, so comparing the
        text compares the instants. Equal start times fall back to creation
        order, then id.
        """
        now = now or TimeNormalizer.utc_now_iso()
        events = _active_events(db).filter(
            Event.is_public.is_(True),
            Event.start_at >= now,
        ).order_by(Event.start_at, Event.created_at, Event.id).limit(limit).all()
        return [EventSummary.model_validate(event) for event in events]

    @staticmethod
    def cancel_event(db: Session, event_id: str) -> bool:
        """Soft delete; the row stays for audit."""
        event = _active_events(db).filter(Event.id == event_id).first()
        if not event:
            return False
        event.cancelled_at = datetime.utcnow()
        db.commit()
        logger.info(f"Cancelled event {event_id}")
        return True

    @staticmethod
    def ensure_user(db: Session, user_id: int, username: Optional[str] = None) -> None:
        """Register the user if absent; an existing username is left untouched."""
        _insert_ignore(db, User, id=user_id, username=username)

    @staticmethod
    def subscribe(db: Session, user_id: int, event_id: str) -> None:
        """Idempotent; subscribing twice leaves a single row."""
        _insert_ignore(db, Subscription, user_id=user_id, event_id=event_id)
        logger.info(f"User {user_id} subscribed to event {event_id}")

    @staticmethod
    def count_subscriptions(db: Session, event_id: str) -> int:
        return db.query(func.count()).select_from(Subscription).filter(
            Subscription.event_id == event_id
        ).scalar()
