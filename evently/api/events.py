"""Event API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from evently.api.dependencies import get_current_user, get_event_service
from evently.models.user import User
from evently.schemas.event import EventCreate, EventResponse, EventUpdate, MessageResponse
from evently.services.events import EventService

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=list[EventResponse])
def list_events(
    service: Annotated[EventService, Depends(get_event_service)],
    upcoming: bool = Query(default=False, description="Only events from today onward"),
    q: str | None = Query(default=None, max_length=255, description="Search title or location"),
    category: str | None = Query(default=None, max_length=100),
):
    """List all events, soonest first."""
    return service.list_events(upcoming=upcoming, search=q, category=category)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    event_data: EventCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[EventService, Depends(get_event_service)],
):
    """Create a new event."""
    return service.create_event(event_data, current_user)


@router.get("/user/created", response_model=list[EventResponse])
def get_created_events(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[EventService, Depends(get_event_service)],
):
    """Get events created by the current user."""
    return service.events_created_by(current_user)


@router.get("/user/attending", response_model=list[EventResponse])
def get_attending_events(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[EventService, Depends(get_event_service)],
):
    """Get events the current user has RSVP'd to."""
    return service.events_attended_by(current_user)


@router.get("/{event_id}", response_model=EventResponse)
def get_event(
    event_id: int,
    service: Annotated[EventService, Depends(get_event_service)],
):
    """Get a specific event."""
    return service.get_event(event_id)


@router.put("/{event_id}", response_model=EventResponse)
def update_event(
    event_id: int,
    event_data: EventUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[EventService, Depends(get_event_service)],
):
    """Update an event (creator only)."""
    return service.update_event(event_id, event_data, current_user)


@router.delete("/{event_id}", response_model=MessageResponse)
def delete_event(
    event_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[EventService, Depends(get_event_service)],
):
    """Delete an event (creator only)."""
    service.delete_event(event_id, current_user)
    return MessageResponse(message="Event deleted successfully")


@router.post("/{event_id}/rsvp", response_model=EventResponse)
def rsvp_event(
    event_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[EventService, Depends(get_event_service)],
):
    """RSVP the current user to an event."""
    return service.rsvp(event_id, current_user)


@router.delete("/{event_id}/rsvp", response_model=EventResponse)
def cancel_rsvp(
    event_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[EventService, Depends(get_event_service)],
):
    """Cancel the current user's RSVP."""
    return service.cancel_rsvp(event_id, current_user)
