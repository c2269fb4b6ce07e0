"""
Chat transport Pydantic schemas
"""

from typing import List, Optional
from pydantic import BaseModel

class ChatMessage(BaseModel):
    """Inbound text message from a caller"""
    caller_id: int
    username: Optional[str] = None
    text: str

class ChatCallback(BaseModel):
    """Inline button press, e.g. ``sub:<event id>``"""
    caller_id: int
    username: Optional[str] = None
    data: str

class ChatButton(BaseModel):
    """Inline button; buttons sharing a row index are rendered side by side"""
    label: str
    callback_data: str
    row: int = 0

class ChatReply(BaseModel):
    """What the transport should send back to the caller"""
    text: Optional[str] = None
    parse_mode: Optional[str] = None
    buttons: List[ChatButton] = []
    callback_answer: Optional[str] = None
    remove_buttons: bool = False

class BeginSubmissionRequest(BaseModel):
    """Put a caller into submission mode"""
    caller_id: int

class SubmissionRequest(BaseModel):
    """Submission line sent by an awaiting caller"""
    caller_id: int
    text: str
