"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .chat import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "EventCreationRequest",
    "EventSummary",
    "EventDetail",
    "RegisterRequest",
    "SubscribeRequest",
    "ChatMessage",
    "ChatCallback",
    "ChatButton",
    "ChatReply",
    "BeginSubmissionRequest",
    "SubmissionRequest",
]
