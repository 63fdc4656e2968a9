"""Pydantic schemas for API requests and responses."""

from evently.schemas.auth import AuthResponse, UserLogin, UserResponse, UserSignup
from evently.schemas.event import EventCreate, EventResponse, EventUpdate, MessageResponse

__all__ = [
    "UserSignup",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "MessageResponse",
]
