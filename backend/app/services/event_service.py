"""Event service: the thin event/shift store the carpool subsystem reads from.

Responsibilities:
- Board-only create/delete of events and shifts
- Event deletion cascades shifts, RSVPs, carpools and carpool members
- Attendee rendering through two explicit view types, chosen by capability
"""
import logging

from sqlalchemy.orm import Session

from app.auth import board_only
from app.database import atomic
from app.errors import InvalidState, NotFound
from app.models.event import Event, Shift
from app.models.user import User
from app.schemas.event import EventCreate, EventDetailOut, EventOut, ShiftCreate
from app.schemas.rsvp import BoardAttendeeView, PublicAttendeeView
from app.services.deduplication import deduplicate_by_user
from app.services.rsvp_service import driver_info_of, list_event_rsvps

logger = logging.getLogger(__name__)


def get_event_or_404(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFound("Event not found")
    return event


@board_only
def create_event(db: Session, actor: User, payload: EventCreate) -> Event:
    if payload.end_time_utc <= payload.start_time_utc:
        raise InvalidState("Event must end after it starts")

    with atomic(db):
        event = Event(
            title=payload.title,
            description=payload.description,
            location=payload.location,
            start_time_utc=payload.start_time_utc,
            end_time_utc=payload.end_time_utc,
            event_type=payload.event_type,
            is_offsite=payload.is_offsite,
            created_by=actor.user_id,
        )
        db.add(event)
    db.refresh(event)
    logger.info("Created event '%s' (%s) by %s, offsite=%s", event.title, event.event_id, actor.user_id, event.is_offsite)
    return event


@board_only
def delete_event(db: Session, actor: User, event_id: str) -> None:
    event = get_event_or_404(db, event_id)
    with atomic(db):
        db.delete(event)
    logger.info("Deleted event %s by %s", event_id, actor.user_id)


@board_only
def add_shift(db: Session, actor: User, event_id: str, payload: ShiftCreate) -> Shift:
    event = get_event_or_404(db, event_id)
    if payload.end_time_utc <= payload.start_time_utc:
        raise InvalidState("Shift must end after it starts")

    with atomic(db):
        shift = Shift(
            event_id=event.event_id,
            start_time_utc=payload.start_time_utc,
            end_time_utc=payload.end_time_utc,
            required_people=payload.required_people,
        )
        db.add(shift)
    db.refresh(shift)
    logger.info("Added shift %s to event %s (%d people)", shift.shift_id, event_id, shift.required_people)
    return shift


def _attendee_view(rsvp, viewer: User):
    user = rsvp.user
    if not viewer.is_board:
        return PublicAttendeeView(rsvp_id=rsvp.rsvp_id, name=user.name, shift_id=rsvp.shift_id)
    return BoardAttendeeView(
        rsvp_id=rsvp.rsvp_id,
        name=user.name,
        shift_id=rsvp.shift_id,
        email=user.email,
        phone_number=user.phone_number,
        needs_ride=rsvp.needs_ride,
        can_drive=rsvp.can_drive,
        self_transport=rsvp.self_transport,
        campus_location=rsvp.campus_location.value if rsvp.campus_location else None,
        driver_info=driver_info_of(rsvp),
        created_at=rsvp.created_at,
    )


def get_event_detail(db: Session, viewer: User, event_id: str) -> EventDetailOut:
    """Event with its shifts and one attendee entry per person."""
    event = get_event_or_404(db, event_id)
    rsvps = deduplicate_by_user(list_event_rsvps(db, event_id))
    base = EventOut.model_validate(event)
    return EventDetailOut(
        **base.model_dump(),
        attendees=[_attendee_view(rsvp, viewer) for rsvp in rsvps],
    )
