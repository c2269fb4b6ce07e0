"""
Per-caller conversation state for free-text event submissions
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import EventBotError, StorageError, SubmissionFormatError, TimeParseError
from app.services.event_store import EventStore
from app.services.submission_parser import parse_submission

logger = logging.getLogger(__name__)


class ConversationState(str, Enum):
    IDLE = "idle"
    AWAITING_SUBMISSION = "awaiting_submission"


@dataclass
class SubmissionOutcome:
    """Result of one submission attempt"""
    success: bool
    event_id: Optional[str] = None
    title: Optional[str] = None
    error: Optional[EventBotError] = None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None


class ConversationStateMachine:
    """Tracks which callers will have their next text read as a submission.

    Callers without an entry are Idle. Every transition happens under one
    lock; a submission claims (removes) the caller's entry before parsing, so
    at most one attempt per caller is ever in flight.
    """

    def __init__(self, zone: Optional[str] = None):
        self.zone = zone
        self._states: Dict[int, ConversationState] = {}
        self._lock = threading.Lock()

    def state_of(self, caller_id: int) -> ConversationState:
        with self._lock:
            return self._states.get(caller_id, ConversationState.IDLE)

    def is_awaiting(self, caller_id: int) -> bool:
        return self.state_of(caller_id) is ConversationState.AWAITING_SUBMISSION

    def begin_submission(self, caller_id: int) -> None:
        with self._lock:
            self._states[caller_id] = ConversationState.AWAITING_SUBMISSION
        logger.info(f"Caller {caller_id} is awaiting an event submission")

    def cancel(self, caller_id: int) -> bool:
        """Return the caller to Idle; True if a submission was pending."""
        return self._claim(caller_id)

    def _claim(self, caller_id: int) -> bool:
        with self._lock:
            state = self._states.pop(caller_id, ConversationState.IDLE)
        return state is ConversationState.AWAITING_SUBMISSION

    def handle_text(self, db: Session, caller_id: int, text: str) -> Optional[SubmissionOutcome]:
        """Consume ``text`` as a submission if the caller is awaiting one.

        Returns None for Idle callers so other handlers can look at the text.
        """
        if not self._claim(caller_id):
            return None

        try:
            request = parse_submission(text, zone=self.zone)
            event_id = EventStore.create_event(db, request, creator_id=caller_id)
        except (TimeParseError, SubmissionFormatError) as e:
            logger.info(f"Rejected submission from {caller_id}: {e.error_code}")
            return SubmissionOutcome(success=False, error=e)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception(f"Failed to store submission from {caller_id}")
            return SubmissionOutcome(success=False, error=StorageError(e))
        except Exception as e:
            db.rollback()
            logger.exception(f"Unexpected error handling submission from {caller_id}")
            return SubmissionOutcome(success=False, error=StorageError(e))

        return SubmissionOutcome(success=True, event_id=event_id, title=request.title)
