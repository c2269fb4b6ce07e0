"""
Database models package
"""

from .user import User
from .event import Event
from .subscription import Subscription

__all__ = ["User", "Event", "Subscription"]
