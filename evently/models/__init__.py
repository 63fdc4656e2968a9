"""SQLAlchemy models."""

from evently.models.event import Event, EventAttendee
from evently.models.user import User

__all__ = [
    "User",
    "Event",
    "EventAttendee",
]
