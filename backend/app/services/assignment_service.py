"""Manual carpool corrections after generation: seat, unseat and move riders.

Only draft carpools can change. Seat counts never exceed the driver's
capacity and a person holds at most one seat per event, through their latest
RSVP and never while driving. Moving a seated rider goes through
``reassign_rider``.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.auth import board_only
from app.database import atomic
from app.errors import CapacityExceeded, Conflict, InvalidState, NotFound
from app.models.carpool import Carpool, CarpoolMember
from app.models.rsvp import Rsvp
from app.models.user import User
from app.schemas.carpool import ReassignRiderResult
from app.services.event_service import get_event_or_404
from app.services.rsvp_service import find_user_rsvp

logger = logging.getLogger(__name__)


def _get_carpool(db: Session, carpool_id: str, label: str = "Carpool") -> Carpool:
    carpool = db.query(Carpool).filter(Carpool.carpool_id == carpool_id).first()
    if not carpool:
        raise NotFound(f"{label} not found")
    return carpool


def _membership_of(db: Session, rsvp_id: str) -> Optional[CarpoolMember]:
    return db.query(CarpoolMember).filter(CarpoolMember.rsvp_id == rsvp_id).first()


def _seat_of_person(db: Session, event_id: str, user_id: str) -> Optional[CarpoolMember]:
    return (
        db.query(CarpoolMember)
        .join(Rsvp, CarpoolMember.rsvp_id == Rsvp.rsvp_id)
        .filter(Rsvp.event_id == event_id, Rsvp.user_id == user_id)
        .first()
    )


def _drives_in_event(db: Session, event_id: str, user_id: str) -> bool:
    """True if any RSVP of this person drives a carpool of the event."""
    return (
        db.query(Carpool)
        .join(Rsvp, Carpool.driver_rsvp_id == Rsvp.rsvp_id)
        .filter(Carpool.event_id == event_id, Rsvp.user_id == user_id)
        .first()
        is not None
    )


def _ensure_latest(db: Session, rsvp: Rsvp) -> None:
    latest = find_user_rsvp(db, rsvp.event_id, rsvp.user_id)
    if latest.rsvp_id != rsvp.rsvp_id:
        raise InvalidState(
            "RSVP was superseded by a newer one from the same person",
            details={"rsvp_id": rsvp.rsvp_id, "latest_rsvp_id": latest.rsvp_id},
        )


@board_only
def update_carpool_assignment(
    db: Session,
    actor: User,
    carpool_id: str,
    add_rsvp_ids: Optional[list[str]] = None,
    remove_rsvp_ids: Optional[list[str]] = None,
) -> None:
    """Remove then add riders on a draft carpool; all or nothing."""
    carpool = _get_carpool(db, carpool_id)
    if not carpool.is_draft:
        raise InvalidState("Cannot modify finalized carpools")

    remove_ids = set(remove_rsvp_ids or [])
    add_ids = list(dict.fromkeys(add_rsvp_ids or []))

    removed = 0
    with atomic(db):
        for member in list(carpool.members):
            if member.rsvp_id in remove_ids:
                carpool.members.remove(member)
                removed += 1
        db.flush()

        seated = {member.rsvp_id for member in carpool.members}
        new_ids = []
        for rsvp_id in add_ids:
            if rsvp_id in seated:
                continue
            rsvp = db.query(Rsvp).filter(Rsvp.rsvp_id == rsvp_id).first()
            if not rsvp:
                raise NotFound(f"RSVP {rsvp_id} not found")
            if rsvp.event_id != carpool.event_id:
                raise InvalidState(f"RSVP {rsvp_id} belongs to a different event")
            _ensure_latest(db, rsvp)
            if _drives_in_event(db, rsvp.event_id, rsvp.user_id):
                raise InvalidState("A driver cannot be added as a rider", details={"rsvp_id": rsvp_id})
            if _seat_of_person(db, rsvp.event_id, rsvp.user_id):
                raise Conflict(
                    "Rider is assigned to another carpool. Use reassignment to move them explicitly.",
                    details={"rsvp_id": rsvp_id},
                )
            new_ids.append(rsvp_id)

        if len(seated) + len(new_ids) > carpool.capacity:
            raise CapacityExceeded(
                "Adding these riders would exceed carpool capacity",
                details={"capacity": carpool.capacity, "requested": len(seated) + len(new_ids)},
            )
        for rsvp_id in new_ids:
            carpool.members.append(CarpoolMember(rsvp_id=rsvp_id))

    logger.info(
        "Carpool %s updated by %s: +%d / -%d riders",
        carpool_id, actor.user_id, len(new_ids), removed,
    )


@board_only
def reassign_rider(
    db: Session,
    actor: User,
    event_id: str,
    rider_rsvp_id: str,
    from_carpool_id: Optional[str] = None,
    to_carpool_id: Optional[str] = None,
) -> ReassignRiderResult:
    """Move a rider to ``to_carpool_id``, or unseat them when it is omitted.

    ``from_carpool_id`` is optional; when given it must match the rider's
    current carpool so a stale board view cannot move the wrong seat.
    """
    get_event_or_404(db, event_id)
    rider = db.query(Rsvp).filter(Rsvp.rsvp_id == rider_rsvp_id).first()
    if not rider or rider.event_id != event_id:
        raise NotFound("Rider RSVP not found for this event")
    if _drives_in_event(db, event_id, rider.user_id):
        raise InvalidState("A driver cannot be reassigned as a rider")

    membership = _membership_of(db, rider_rsvp_id)
    current_id = membership.carpool_id if membership else None
    if from_carpool_id is not None and from_carpool_id != current_id:
        raise Conflict(
            "Rider is no longer in the expected carpool; refresh and retry",
            details={"current_carpool_id": current_id},
        )

    target = None
    if to_carpool_id:
        target = _get_carpool(db, to_carpool_id, label="Target carpool")
        _ensure_latest(db, rider)
        other_seat = _seat_of_person(db, event_id, rider.user_id)
        if other_seat and other_seat.rsvp_id != rider_rsvp_id:
            raise Conflict("This person already holds a seat through another RSVP", details={"rsvp_id": other_seat.rsvp_id})
        if target.event_id != event_id:
            raise InvalidState("Target carpool does not belong to this event")
        if not target.is_draft:
            raise InvalidState("Cannot reassign riders to finalized carpools")

    if membership and not membership.carpool.is_draft:
        raise InvalidState("Cannot reassign riders from finalized carpools")

    if target is not None and to_carpool_id == current_id:
        return ReassignRiderResult(
            success=True, rider_rsvp_id=rider_rsvp_id, from_carpool_id=current_id, to_carpool_id=to_carpool_id
        )

    if target is not None and len(target.members) >= target.capacity:
        raise CapacityExceeded("Target carpool is at capacity", details={"capacity": target.capacity})

    with atomic(db):
        if membership:
            db.delete(membership)
            db.flush()
        if target is not None:
            db.add(CarpoolMember(carpool_id=target.carpool_id, rsvp_id=rider_rsvp_id))

    logger.info(
        "Rider %s reassigned %s -> %s on event %s by %s",
        rider_rsvp_id, current_id, to_carpool_id, event_id, actor.user_id,
    )
    return ReassignRiderResult(
        success=True, rider_rsvp_id=rider_rsvp_id, from_carpool_id=current_id, to_carpool_id=to_carpool_id
    )
