"""Event schemas."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, field_validator

from evently.schemas.auth import UserResponse

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class EventCreate(BaseModel):
    """Create a new event."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=5000)
    date: dt.date
    time: str = Field(..., pattern=TIME_PATTERN)
    location: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(..., ge=1, le=100_000)
    category: str | None = Field(None, max_length=100)
    image_url: str | None = Field(None, max_length=2048)

    @field_validator("title", "location")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field must not be blank")
        return value


class EventUpdate(BaseModel):
    """Update an event. Omitted fields are left untouched."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    date: dt.date | None = None
    time: str | None = Field(None, pattern=TIME_PATTERN)
    location: str | None = Field(None, min_length=1, max_length=255)
    capacity: int | None = Field(None, ge=1, le=100_000)
    category: str | None = Field(None, max_length=100)
    image_url: str | None = Field(None, max_length=2048)

    @field_validator("title", "location")
    @classmethod
    def not_blank(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Field must not be blank")
        return value


class EventResponse(BaseModel):
    """Event response with creator and attendee details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    date: dt.date
    time: str
    location: str
    capacity: int
    category: str | None
    image_url: str | None
    created_by: UserResponse
    attendees: list[UserResponse]
    attendee_count: int
    spots_left: int
    is_full: bool
    created_at: dt.datetime
    updated_at: dt.datetime


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
