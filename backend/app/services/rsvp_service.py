"""RSVP store: transportation intent and shift sign-up.

RSVPs are upserted on (event, person). Older duplicate rows are tolerated;
readers resolve them with ``deduplicate_by_user``.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.database import atomic
from app.errors import CapacityExceeded, InvalidRsvp, InvalidState, NotFound, Unauthorized
from app.models.carpool import Carpool, CarpoolMember
from app.models.event import Event, Shift
from app.models.rsvp import CampusLocation, Rsvp
from app.models.user import User
from app.schemas.rsvp import DriverInfo, RsvpCreate, RsvpOut

logger = logging.getLogger(__name__)


def validate_transport_options(
    needs_ride: bool,
    can_drive: bool,
    self_transport: bool,
    driver_info: Optional[DriverInfo],
) -> None:
    if can_drive and driver_info is None:
        raise InvalidRsvp("Driver info required when offering to drive")
    if needs_ride and can_drive:
        raise InvalidRsvp("Cannot both need a ride and offer to drive")
    if self_transport and (needs_ride or can_drive):
        raise InvalidRsvp("Cannot select self-transport with other transportation options")


def _validate_shift_capacity(db: Session, event_id: str, shift_id: str, user_id: str) -> None:
    shift = db.query(Shift).filter(Shift.shift_id == shift_id).first()
    if not shift:
        raise NotFound("Shift not found")
    if shift.event_id != event_id:
        raise InvalidRsvp("Invalid shift for this event")

    shift_rsvps = db.query(Rsvp).filter(Rsvp.shift_id == shift_id).all()
    already_in_shift = any(r.user_id == user_id for r in shift_rsvps)
    if not already_in_shift and len(shift_rsvps) >= shift.required_people:
        raise InvalidRsvp("This shift is already full")


def find_user_rsvp(db: Session, event_id: str, user_id: str) -> Optional[Rsvp]:
    """Latest RSVP of a person for an event."""
    return (
        db.query(Rsvp)
        .filter(Rsvp.event_id == event_id, Rsvp.user_id == user_id)
        .order_by(Rsvp.created_at.desc(), Rsvp.rsvp_id.desc())
        .first()
    )


def list_event_rsvps(db: Session, event_id: str) -> list[Rsvp]:
    """All RSVPs of an event in registration order."""
    return (
        db.query(Rsvp)
        .filter(Rsvp.event_id == event_id)
        .order_by(Rsvp.created_at, Rsvp.rsvp_id)
        .all()
    )


# Fields whose change alters a carpool the RSVP belongs to
TRANSPORT_FIELDS = ("needs_ride", "can_drive", "self_transport", "campus_location", "car_type", "car_color", "capacity")


def carpool_links(db: Session, rsvp_id: str) -> tuple[Optional[Carpool], Optional[CarpoolMember]]:
    """The carpool an RSVP drives and the seat it holds, either may be None."""
    driven = db.query(Carpool).filter(Carpool.driver_rsvp_id == rsvp_id).first()
    seat = db.query(CarpoolMember).filter(CarpoolMember.rsvp_id == rsvp_id).first()
    return driven, seat


def _reconcile_carpools(db: Session, rsvp: Rsvp, fields: dict) -> None:
    """Apply an RSVP's new transport fields to the carpool it drives or sits in.

    Finalized carpools refuse any transport change. On a draft, a driver may
    not drop below the riders already seated; a driver who stops driving an
    empty carpool loses it, and a rider who no longer needs a ride loses the seat.
    """
    driven, seat = carpool_links(db, rsvp.rsvp_id)
    carpool = driven or (seat.carpool if seat else None)
    if carpool is None:
        return

    changed = any(getattr(rsvp, name) != fields[name] for name in TRANSPORT_FIELDS)
    if not carpool.is_draft:
        if changed:
            raise InvalidState(
                "Carpools for this event are finalized; ask the board to change your transportation",
                details={"carpool_id": carpool.carpool_id},
            )
        return

    if driven:
        still_driving = bool(fields["can_drive"] and fields["capacity"] is not None and not fields["self_transport"])
        seats = fields["capacity"] if still_driving else 0
        riders = len(driven.members)
        if seats < riders:
            raise CapacityExceeded(
                "Riders are already seated in your car; ask the board to move them first",
                details={"capacity": seats, "riders": riders},
            )
        if not still_driving:
            db.delete(driven)
            logger.info("Removed empty carpool %s after RSVP %s stopped driving", driven.carpool_id, rsvp.rsvp_id)
    elif not fields["needs_ride"] or fields["self_transport"]:
        db.delete(seat)
        logger.info("Unseated RSVP %s from carpool %s; no longer needs a ride", rsvp.rsvp_id, seat.carpool_id)


def upsert_rsvp(db: Session, actor: User, payload: RsvpCreate) -> Rsvp:
    """Create or update the caller's RSVP for an event."""
    event = db.query(Event).filter(Event.event_id == payload.event_id).first()
    if not event:
        raise NotFound("Event not found")

    if event.is_offsite and not payload.campus_location:
        raise InvalidRsvp("Please tell us whether you're on or off campus")

    validate_transport_options(
        payload.needs_ride, payload.can_drive, payload.self_transport, payload.driver_info
    )

    campus_location = None
    if event.is_offsite:
        try:
            campus_location = CampusLocation(payload.campus_location)
        except ValueError:
            raise InvalidRsvp(f"Invalid campus location: {payload.campus_location}")

    if payload.shift_id:
        _validate_shift_capacity(db, event.event_id, payload.shift_id, actor.user_id)

    driver = payload.driver_info
    fields = {
        "shift_id": payload.shift_id,
        "needs_ride": payload.needs_ride,
        "can_drive": payload.can_drive,
        "self_transport": payload.self_transport,
        "campus_location": campus_location,
        "car_type": driver.car_type if driver else None,
        "car_color": driver.car_color if driver else None,
        "capacity": driver.capacity if driver else None,
    }

    with atomic(db):
        rsvp = find_user_rsvp(db, event.event_id, actor.user_id)
        if rsvp:
            _reconcile_carpools(db, rsvp, fields)
            for field, value in fields.items():
                setattr(rsvp, field, value)
            action = "Updated"
        else:
            rsvp = Rsvp(event_id=event.event_id, user_id=actor.user_id, **fields)
            db.add(rsvp)
            action = "Created"
    db.refresh(rsvp)
    logger.info("%s RSVP %s for user %s on event %s", action, rsvp.rsvp_id, actor.user_id, event.event_id)
    return rsvp


def delete_rsvp(db: Session, actor: User, rsvp_id: str) -> None:
    """Delete an RSVP (owner or board) along with any carpool seat it holds."""
    rsvp = db.query(Rsvp).filter(Rsvp.rsvp_id == rsvp_id).first()
    if not rsvp:
        raise NotFound("RSVP not found")
    if rsvp.user_id != actor.user_id and not actor.is_board:
        raise Unauthorized("Can only delete your own RSVPs")

    driven, seat = carpool_links(db, rsvp_id)
    if (driven and not driven.is_draft) or (seat and not seat.carpool.is_draft):
        raise InvalidState("Cannot delete an RSVP that belongs to a finalized carpool")

    with atomic(db):
        if seat:
            db.delete(seat)
        if driven:
            db.delete(driven)
            logger.info("Removed carpool %s backed by deleted RSVP %s", driven.carpool_id, rsvp_id)
        db.delete(rsvp)
    logger.info("Deleted RSVP %s by user %s", rsvp_id, actor.user_id)


def list_user_rsvps(db: Session, user: User) -> list[Rsvp]:
    return (
        db.query(Rsvp)
        .filter(Rsvp.user_id == user.user_id)
        .order_by(Rsvp.created_at.desc())
        .all()
    )


def driver_info_of(rsvp: Rsvp) -> Optional[DriverInfo]:
    if not rsvp.has_driver_info:
        return None
    return DriverInfo(car_type=rsvp.car_type or "", car_color=rsvp.car_color or "", capacity=rsvp.capacity)


def to_rsvp_out(rsvp: Rsvp) -> RsvpOut:
    return RsvpOut(
        rsvp_id=rsvp.rsvp_id,
        event_id=rsvp.event_id,
        user_id=rsvp.user_id,
        shift_id=rsvp.shift_id,
        needs_ride=rsvp.needs_ride,
        can_drive=rsvp.can_drive,
        self_transport=rsvp.self_transport,
        campus_location=rsvp.campus_location.value if rsvp.campus_location else None,
        driver_info=driver_info_of(rsvp),
        created_at=rsvp.created_at,
    )
