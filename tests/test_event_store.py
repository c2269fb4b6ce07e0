"""
Tests for the event store
"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from app.core.db import Base, create_db_engine
from app.models import Event, Subscription, User
from app.schemas.event import EventCreationRequest
from app.services.event_store import EventStore
from app.services.submission_parser import parse_submission

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_event_store.db"
engine = create_db_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = "2030-01-01T00:00:00.000Z"

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

def make_request(title="Weekly QA", start_at="2030-06-01T17:00:00.000Z", is_public=True):
    return EventCreationRequest(
        title=title,
        start_at=start_at,
        duration_min=45,
        meeting_url="https://meet.example/weekly",
        is_public=is_public,
    )

def test_create_and_get_round_trip(db_session):
    """Test a parsed submission is stored and read back unchanged"""
    request = parse_submission(
        "QA Sync | 2025-12-15 19:00 | 60 | https://meet.example/abc | public", zone="Europe/Berlin"
    )
    event_id = EventStore.create_event(db_session, request, creator_id=42)

    event = EventStore.get_event(db_session, event_id)
    assert event is not None
    assert event.id == event_id
    assert event.title == request.title
    assert event.start_at == request.start_at
    assert event.duration_min == request.duration_min
    assert event.meeting_url == request.meeting_url
    assert event.is_public == request.is_public
    assert event.created_by == 42
    assert event.created_at is not None

def test_create_without_creator(db_session):
    """Test the creator reference is optional"""
    event_id = EventStore.create_event(db_session, make_request())
    assert EventStore.get_event(db_session, event_id).created_by is None

def test_event_ids_are_unique(db_session):
    """Test every created event gets a fresh identifier"""
    ids = {EventStore.create_event(db_session, make_request(title=f"Event {i}")) for i in range(25)}
    assert len(ids) == 25
    assert db_session.query(Event).count() == 25

def test_get_event_hides_unknown_and_cancelled(db_session):
    """Test unknown and cancelled events both read as not found"""
    event_id = EventStore.create_event(db_session, make_request())
    assert EventStore.cancel_event(db_session, event_id)

    assert EventStore.get_event(db_session, "never-created") is None
    assert EventStore.get_event(db_session, event_id) is None

    # The row is kept for audit
    row = db_session.query(Event).filter(Event.id == event_id).first()
    assert row.cancelled_at is not None

def test_cancel_event_twice(db_session):
    """Test cancelling reports whether anything changed"""
    event_id = EventStore.create_event(db_session, make_request())

    assert EventStore.cancel_event(db_session, event_id) is True
    assert EventStore.cancel_event(db_session, event_id) is False
    assert EventStore.cancel_event(db_session, "missing") is False

def test_get_event_returns_snapshot(db_session):
    """Test the returned event is detached from the stored row"""
    event_id = EventStore.create_event(db_session, make_request())
    snapshot = EventStore.get_event(db_session, event_id)
    snapshot.title = "Changed locally"

    assert EventStore.get_event(db_session, event_id).title == "Weekly QA"

def test_list_upcoming_public_filters(db_session):
    """Test private, cancelled and past events are never listed"""
    public_id = EventStore.create_event(db_session, make_request(title="Public"))
    EventStore.create_event(db_session, make_request(title="Private", is_public=False))
    cancelled_id = EventStore.create_event(db_session, make_request(title="Cancelled"))
    EventStore.create_event(db_session, make_request(title="Past", start_at="2029-12-31T23:59:59.999Z"))
    EventStore.cancel_event(db_session, cancelled_id)

    events = EventStore.list_upcoming_public(db_session, limit=10, now=NOW)

    assert [event.id for event in events] == [public_id]

def test_list_upcoming_public_includes_start_equal_to_now(db_session):
    """Test an event starting exactly now is still upcoming"""
    EventStore.create_event(db_session, make_request(start_at=NOW))
    assert len(EventStore.list_upcoming_public(db_session, limit=5, now=NOW)) == 1

def test_list_upcoming_public_order_and_limit(db_session):
    """Test events come soonest first and are truncated to the limit"""
    starts = [
        "2030-03-01T10:00:00.000Z",
        "2030-01-15T08:30:00.000Z",
        "2031-01-01T00:00:00.000Z",
        "2030-01-15T08:30:00.000Z",
        "2030-02-01T12:00:00.000Z",
    ]
    for i, start in enumerate(starts):
        EventStore.create_event(db_session, make_request(title=f"Event {i}", start_at=start))

    events = EventStore.list_upcoming_public(db_session, limit=4, now=NOW)

    assert len(events) == 4
    listed = [event.start_at for event in events]
    assert listed == sorted(listed)
    assert listed[-1] == "2030-03-01T10:00:00.000Z"
    assert set(events[0].model_dump()) == {"id", "title", "start_at", "meeting_url"}

def test_ensure_user_is_idempotent(db_session):
    """Test registering twice keeps the first username"""
    EventStore.ensure_user(db_session, 1001, "alice")
    EventStore.ensure_user(db_session, 1001, "renamed")
    EventStore.ensure_user(db_session, 1002)

    assert db_session.query(User).count() == 2
    user = db_session.query(User).filter(User.id == 1001).first()
    assert user.username == "alice"
    assert user.email_verified is False
    assert user.tz

def test_subscribe_is_idempotent(db_session):
    """Test subscribing twice leaves a single row"""
    EventStore.ensure_user(db_session, 1001, "alice")
    event_id = EventStore.create_event(db_session, make_request())

    EventStore.subscribe(db_session, 1001, event_id)
    EventStore.subscribe(db_session, 1001, event_id)

    assert EventStore.count_subscriptions(db_session, event_id) == 1
    assert db_session.query(Subscription).filter(
        Subscription.user_id == 1001,
        Subscription.event_id == event_id
    ).count() == 1

def test_subscribe_requires_existing_rows(db_session):
    """Test foreign keys reject subscriptions to ids that never existed"""
    EventStore.ensure_user(db_session, 1001, "alice")

    with pytest.raises(IntegrityError):
        EventStore.subscribe(db_session, 1001, "never-created")
    db_session.rollback()

    assert db_session.query(Subscription).count() == 0

def test_list_upcoming_public_orders_early_years(db_session):
    """Test instants before year 1000 sort chronologically"""
    late = EventStore.create_event(db_session, parse_submission("Later | 1500-01-01 10:00 | 60 | https://x.com", zone="UTC"))
    early = EventStore.create_event(db_session, parse_submission("Early | 0999-06-01 10:00 | 60 | https://x.com", zone="UTC"))

    events = EventStore.list_upcoming_public(db_session, limit=5, now="0500-01-01T00:00:00.000Z")

    assert [event.id for event in events] == [early, late]

def test_list_upcoming_public_skips_private_before_limit(db_session):
    """Test private events do not use up the listing limit"""
    EventStore.create_event(db_session, make_request(title="Private", start_at="2030-01-01T10:00:00.000Z", is_public=False))
    public_id = EventStore.create_event(db_session, make_request(title="Public", start_at="2030-01-02T10:00:00.000Z"))

    events = EventStore.list_upcoming_public(db_session, limit=1, now=NOW)

    assert [event.id for event in events] == [public_id]
