"""Event and attendance models."""

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from evently.database import Base
from evently.models.mixins import TimestampMixin


class Event(Base, TimestampMixin):
    """An event users can RSVP to."""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5), nullable=False)  # HH:MM, local to the venue
    location = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)
    category = Column(String(100), nullable=True, index=True)
    image_url = Column(String(2048), nullable=True)
    created_by_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    created_by = relationship("User", backref="created_events")
    attendee_links = relationship(
        "EventAttendee",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by=lambda: [EventAttendee.created_at, EventAttendee.id],
    )

    @property
    def attendees(self) -> list:
        """Attending users in RSVP order."""
        return [link.user for link in self.attendee_links]

    @property
    def attendee_count(self) -> int:
        return len(self.attendee_links)

    @property
    def spots_left(self) -> int:
        return max(self.capacity - self.attendee_count, 0)

    @property
    def is_full(self) -> bool:
        return self.attendee_count >= self.capacity

    def has_attendee(self, user_id: int) -> bool:
        """Check whether a user already holds a spot."""
        return any(link.user_id == user_id for link in self.attendee_links)


class EventAttendee(Base):
    """A single RSVP linking a user to an event."""

    __tablename__ = "event_attendees"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_event_attendee"),)

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    event = relationship("Event", back_populates="attendee_links")
    user = relationship("User", backref="attendances")
