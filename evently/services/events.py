"""Event service for listing, editing and RSVPs."""

import logging
from datetime import date

from fastapi import HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, selectinload

from evently.models.event import Event, EventAttendee
from evently.models.user import User
from evently.schemas.event import EventCreate, EventUpdate

logger = logging.getLogger(__name__)

# Primary keys are 32-bit integers; larger ids cannot match a row
MAX_EVENT_ID = 2_147_483_647


class EventService:
    """Service for event CRUD and attendance."""

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self) -> Query:
        """Events with creator and attendees loaded, in calendar order."""
        return (
            self.db.query(Event)
            .options(
                selectinload(Event.created_by),
                selectinload(Event.attendee_links).selectinload(EventAttendee.user),
            )
            .order_by(Event.date, Event.time, Event.id)
        )

    def list_events(
        self,
        upcoming: bool = False,
        search: str | None = None,
        category: str | None = None,
        today: date | None = None,
    ) -> list[Event]:
        """List events, optionally narrowed to upcoming ones or a search term.

        ``search`` matches title or location, case-insensitively.
        """
        query = self._base_query()

        if upcoming:
            query = query.filter(Event.date >= (today or date.today()))

        if search and search.strip():
            term = search.strip().lower()
            query = query.filter(
                or_(
                    func.lower(Event.title).contains(term, autoescape=True),
                    func.lower(Event.location).contains(term, autoescape=True),
                )
            )

        if category:
            query = query.filter(Event.category == category)

        return query.all()

    def _event_not_found(self) -> HTTPException:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")

    def get_event(self, event_id: int) -> Event:
        """Get an event by id or raise 404."""
        if not 1 <= event_id <= MAX_EVENT_ID:
            raise self._event_not_found()

        event = self._base_query().filter(Event.id == event_id).first()
        if not event:
            raise self._event_not_found()
        return event

    def _get_event_for_update(self, event_id: int) -> Event:
        """Load and lock an event row for a read-then-write change.

        The lock is a no-op on SQLite, where writes are already serialized.
        """
        if not 1 <= event_id <= MAX_EVENT_ID:
            raise self._event_not_found()

        event = (
            self.db.query(Event)
            .filter(Event.id == event_id)
            .populate_existing()
            .with_for_update()
            .first()
        )
        if not event:
            raise self._event_not_found()
        return event

    def _require_owner(self, event: Event, user: User, action: str) -> None:
        if event.created_by_id != user.id:
            logger.info(f"User {user.id} denied {action} on event {event.id}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Not authorized to {action} this event",
            )

    def create_event(self, data: EventCreate, user: User) -> Event:
        """Create an event owned by ``user`` with no attendees."""
        event = Event(
            title=data.title,
            description=data.description,
            date=data.date,
            time=data.time,
            location=data.location,
            capacity=data.capacity,
            category=data.category,
            image_url=data.image_url,
            created_by_id=user.id,
        )
        self.db.add(event)
        self.db.commit()
        logger.info(f"User {user.id} created event {event.id} '{event.title}'")
        return self.get_event(event.id)

    def update_event(self, event_id: int, data: EventUpdate, user: User) -> Event:
        """Apply the provided fields to an event owned by ``user``."""
        event = self._get_event_for_update(event_id)
        self._require_owner(event, user, "update")

        changes = data.model_dump(exclude_unset=True)

        # Columns that cannot be null keep their value when sent as null
        for field in ("title", "description", "date", "time", "location", "capacity"):
            if field in changes and changes[field] is None:
                del changes[field]

        if "capacity" in changes and changes["capacity"] < event.attendee_count:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Capacity cannot be less than the current number of attendees",
            )

        for field, value in changes.items():
            setattr(event, field, value)

        self.db.commit()
        logger.info(f"User {user.id} updated event {event.id}: {sorted(changes)}")
        return self.get_event(event.id)

    def delete_event(self, event_id: int, user: User) -> None:
        """Delete an event owned by ``user`` along with its RSVPs."""
        event = self._get_event_for_update(event_id)
        self._require_owner(event, user, "delete")

        self.db.delete(event)
        self.db.commit()
        logger.info(f"User {user.id} deleted event {event_id}")

    def rsvp(self, event_id: int, user: User) -> Event:
        """Register ``user`` as an attendee.

        Rejects users who already hold a spot and events at capacity.
        """
        event = self._get_event_for_update(event_id)

        if event.has_attendee(user.id):
            logger.info(f"User {user.id} already registered for event {event.id}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Already registered for this event",
            )

        if event.is_full:
            logger.info(f"User {user.id} rejected from full event {event.id}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Event is full",
            )

        event.attendee_links.append(EventAttendee(user_id=user.id))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Already registered for this event",
            ) from None

        logger.info(f"User {user.id} registered for event {event.id}")
        return self.get_event(event.id)

    def cancel_rsvp(self, event_id: int, user: User) -> Event:
        """Remove ``user`` from the attendees. Not attending is a no-op."""
        event = self._get_event_for_update(event_id)

        link = next((ln for ln in event.attendee_links if ln.user_id == user.id), None)
        if link is not None:
            event.attendee_links.remove(link)
            self.db.commit()
            logger.info(f"User {user.id} cancelled RSVP for event {event.id}")

        return self.get_event(event.id)

    def events_created_by(self, user: User) -> list[Event]:
        """Events the user created, in calendar order."""
        return self._base_query().filter(Event.created_by_id == user.id).all()

    def events_attended_by(self, user: User) -> list[Event]:
        """Events the user has an RSVP for, in calendar order."""
        return (
            self._base_query()
            .join(EventAttendee, EventAttendee.event_id == Event.id)
            .filter(EventAttendee.user_id == user.id)
            .all()
        )
