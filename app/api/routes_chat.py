"""
Chat transport routes: inbound messages, button callbacks and submissions
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.errors import StorageError
from app.schemas.chat import ChatMessage, ChatCallback, BeginSubmissionRequest, SubmissionRequest
from app.services.chat_service import ChatService, NEW_EVENT_PROMPT
from app.services.conversation import ConversationStateMachine
from app.utils.responses import success_response, error_response, bot_error_response, forbidden_error
from app.utils.security import is_admin

router = APIRouter()

def get_conversation(request: Request) -> ConversationStateMachine:
    return request.app.state.conversation

def get_chat_service(conversation: ConversationStateMachine = Depends(get_conversation)) -> ChatService:
    return ChatService(conversation)

@router.post("/messages")
async def receive_message(
    message: ChatMessage,
    db: Session = Depends(get_db),
    chat: ChatService = Depends(get_chat_service)
):
    """Handle an inbound text message and return the reply to send"""
    reply = chat.handle_message(message, db)
    if reply is None:
        return success_response(message="Message not handled", data=None)

    return success_response(message="Reply ready", data=reply.model_dump())

@router.post("/callbacks")
async def receive_callback(
    callback: ChatCallback,
    db: Session = Depends(get_db),
    chat: ChatService = Depends(get_chat_service)
):
    """Handle an inline button press"""
    reply = chat.handle_callback(callback, db)
    return success_response(message="Reply ready", data=reply.model_dump())

@router.post("/submissions/begin")
async def begin_submission(
    begin: BeginSubmissionRequest,
    conversation: ConversationStateMachine = Depends(get_conversation)
):
    """Treat the caller's next text as an event submission (admins only)"""
    if not is_admin(begin.caller_id):
        raise forbidden_error("Admins only")

    conversation.begin_submission(begin.caller_id)
    return success_response(
        message="Awaiting submission",
        data={"caller_id": begin.caller_id, "prompt": NEW_EVENT_PROMPT}
    )

@router.post("/submissions")
async def submit_event(
    submission: SubmissionRequest,
    db: Session = Depends(get_db),
    conversation: ConversationStateMachine = Depends(get_conversation)
):
    """Submit the event line of a caller that is awaiting a submission"""
    outcome = conversation.handle_text(db, submission.caller_id, submission.text)
    if outcome is None:
        return error_response(
            message="No submission in progress. Start one with /newevent.",
            error_code="not_awaiting",
            status_code=409
        )

    if not outcome.success:
        status_code = 500 if isinstance(outcome.error, StorageError) else 422
        return bot_error_response(outcome.error, status_code=status_code)

    return success_response(
        message="Event created",
        data={"event_id": outcome.event_id, "title": outcome.title},
        status_code=201
    )
