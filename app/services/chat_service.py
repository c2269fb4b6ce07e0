"""
Chat command routing and reply rendering
"""

import logging
import re
from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.schemas.chat import ChatButton, ChatCallback, ChatMessage, ChatReply
from app.schemas.event import EventDetail
from app.services.conversation import ConversationStateMachine, SubmissionOutcome
from app.services.event_store import EventStore
from app.services.time_normalizer import TimeNormalizer
from app.utils.security import is_admin

logger = logging.getLogger(__name__)

DEEP_LINK_RE = re.compile(r"/start(?:@\w+)?\s+event_([\w-]+)")
COMMAND_RE = re.compile(r"^/(\w+)(?:@\w+)?(?:\s|$)")

NEW_EVENT_PROMPT = (
    "Send the event in one line:\n"
    "Title | 2025-12-15 19:00 | 60 | https://meet.link | public\n\n"
    "(To cancel, send nothing or type /start)"
)


def deep_link(event_id: str) -> str:
    return f"/start event_{event_id}"


def render_submission(outcome: SubmissionOutcome) -> ChatReply:
    if outcome.success:
        return ChatReply(
            text=f"Created: {outcome.title}\nID: {outcome.event_id}\n"
                 f"Subscribe link: {deep_link(outcome.event_id)}"
        )
    return ChatReply(text=f"Error: {outcome.message}")


def render_event_card(event: EventDetail) -> ChatReply:
    return ChatReply(
        text=f"Event: *{event.title}*\n"
             f"When: {TimeNormalizer.format_for_display(event.start_at)}\n"
             f"Link: {event.meeting_url}",
        parse_mode="Markdown",
        buttons=[
            ChatButton(label="Subscribe", callback_data=f"sub:{event.id}", row=0),
            ChatButton(label="Add email", callback_data=f"email:{event.id}", row=1),
        ],
    )


class ChatService:
    """Turns inbound chat messages and button presses into replies"""

    def __init__(self, conversation: ConversationStateMachine):
        self.conversation = conversation

    def handle_message(self, message: ChatMessage, db: Session) -> Optional[ChatReply]:
        """Reply to a message, or None when no handler wants it."""
        text = message.text.strip()
        command = COMMAND_RE.match(text)

        if command:
            name = command.group(1).lower()
            if name == "whoami":
                return ChatReply(text=f"Your id: {message.caller_id}")
            if name == "newevent":
                return self.begin_submission(message.caller_id)
            if name == "start":
                link = DEEP_LINK_RE.search(text)
                if link:
                    if self.conversation.cancel(message.caller_id):
                        logger.info(f"Caller {message.caller_id} left submission mode via deep link")
                    return self.event_card(db, link.group(1))
                return self.start(db, message)

        outcome = self.conversation.handle_text(db, message.caller_id, message.text)
        if outcome is not None:
            return render_submission(outcome)

        link = DEEP_LINK_RE.search(text)
        if link:
            return self.event_card(db, link.group(1))
        return None

    def begin_submission(self, caller_id: int) -> ChatReply:
        if not is_admin(caller_id):
            return ChatReply(text="Admins only.")
        self.conversation.begin_submission(caller_id)
        return ChatReply(text=NEW_EVENT_PROMPT)

    def start(self, db: Session, message: ChatMessage) -> ChatReply:
        EventStore.ensure_user(db, message.caller_id, message.username)
        if self.conversation.cancel(message.caller_id):
            logger.info(f"Caller {message.caller_id} left submission mode via /start")

        events = EventStore.list_upcoming_public(db, limit=settings.UPCOMING_LIMIT)
        lines = ["Hi! I keep track of upcoming online meetups.", "Upcoming public events:"]
        if not events:
            lines.append("- nothing announced yet.")
        for event in events:
            lines.append(
                f"• {event.title} - {TimeNormalizer.format_for_display(event.start_at)} (local time)\n"
                f"  {deep_link(event.id)}"
            )
        return ChatReply(text="\n".join(lines))

    def event_card(self, db: Session, event_id: str) -> ChatReply:
        event = EventStore.get_event(db, event_id)
        if not event:
            return ChatReply(text="Event not found or cancelled.")
        return render_event_card(event)

    def handle_callback(self, callback: ChatCallback, db: Session) -> ChatReply:
        action, _, event_id = callback.data.partition(":")

        if action == "sub" and event_id:
            if not EventStore.get_event(db, event_id):
                return ChatReply(callback_answer="Event not found or cancelled.")
            EventStore.ensure_user(db, callback.caller_id, callback.username)
            EventStore.subscribe(db, callback.caller_id, event_id)
            return ChatReply(callback_answer="Subscribed", remove_buttons=True)

        if action == "email" and event_id:
            # Email capture is not implemented yet; the address is not stored.
            return ChatReply(
                callback_answer="",
                text="Send your email in one message (we will duplicate notifications there).",
            )

        logger.warning(f"Unknown callback data from {callback.caller_id}: {callback.data!r}")
        return ChatReply(callback_answer="Unknown action")
