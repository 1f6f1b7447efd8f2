"""Carpool assignment engine: build, read and lock the carpools of an event.

Generation is a pure re-derivation from the event's RSVPs: deduplicate,
partition into drivers and riders, fill seats greedily in registration order,
then replace every existing carpool of the event in one transaction. Carpool
ids therefore change on every run even when the assignment does not.
"""
import logging

from sqlalchemy.orm import Session

from app.auth import board_only
from app.database import atomic
from app.errors import InvalidState, NoDriversAvailable
from app.models.carpool import Carpool, CarpoolMember, CarpoolStatus
from app.models.rsvp import Rsvp
from app.models.user import User
from app.schemas.carpool import (
    CarpoolDriverOut,
    CarpoolOut,
    CarpoolRiderOut,
    FinalizeCarpoolsResult,
    GenerateCarpoolsResult,
)
from app.services.deduplication import deduplicate_by_user
from app.services.event_service import get_event_or_404
from app.services.matching import assign_riders_to_drivers
from app.services.rsvp_service import list_event_rsvps

logger = logging.getLogger(__name__)


def event_carpools(db: Session, event_id: str) -> list[Carpool]:
    """Carpools of an event, ordered by their driver's registration."""
    return (
        db.query(Carpool)
        .join(Rsvp, Carpool.driver_rsvp_id == Rsvp.rsvp_id)
        .filter(Carpool.event_id == event_id)
        .order_by(Rsvp.created_at, Rsvp.rsvp_id)
        .all()
    )


@board_only
def generate_carpools(db: Session, actor: User, event_id: str) -> GenerateCarpoolsResult:
    event = get_event_or_404(db, event_id)
    if not event.is_offsite:
        raise InvalidState("Carpools only apply to offsite events")

    existing = event_carpools(db, event_id)
    if any(not carpool.is_draft for carpool in existing):
        raise InvalidState("Carpools for this event are finalized and cannot be regenerated")

    rsvps = deduplicate_by_user(list_event_rsvps(db, event_id))
    drivers = [rsvp for rsvp in rsvps if rsvp.is_driver]
    riders = [rsvp for rsvp in rsvps if rsvp.is_rider]

    if riders and not drivers:
        raise NoDriversAvailable("No drivers available for riders", details={"riders": len(riders)})

    result = assign_riders_to_drivers(drivers, riders)

    with atomic(db):
        for carpool in existing:
            db.delete(carpool)
        # Old rows must be gone before the unique driver/rider columns are reused
        db.flush()

        for assignment in result.assignments:
            carpool = Carpool(
                event_id=event_id,
                driver_rsvp_id=assignment.driver_rsvp_id,
                status=CarpoolStatus.draft,
            )
            carpool.members = [CarpoolMember(rsvp_id=rsvp_id) for rsvp_id in assignment.rider_rsvp_ids]
            db.add(carpool)

    logger.info(
        "Generated %d carpools for event %s (replaced %d): %d riders assigned, %d unassigned",
        len(result.assignments), event_id, len(existing), result.riders_assigned, result.riders_unassigned,
    )
    return GenerateCarpoolsResult(
        carpools_created=len(result.assignments),
        riders_assigned=result.riders_assigned,
        riders_unassigned=result.riders_unassigned,
    )


def _carpool_view(db: Session, carpool: Carpool) -> CarpoolOut:
    driver_rsvp = carpool.driver_rsvp
    driver_user = driver_rsvp.user
    members = (
        db.query(Rsvp)
        .join(CarpoolMember, CarpoolMember.rsvp_id == Rsvp.rsvp_id)
        .filter(CarpoolMember.carpool_id == carpool.carpool_id)
        .order_by(Rsvp.created_at, Rsvp.rsvp_id)
        .all()
    )
    return CarpoolOut(
        carpool_id=carpool.carpool_id,
        status=carpool.status.value,
        driver=CarpoolDriverOut(
            rsvp_id=driver_rsvp.rsvp_id,
            name=driver_user.name,
            email=driver_user.email,
            phone_number=driver_user.phone_number,
            campus_location=driver_rsvp.campus_location.value if driver_rsvp.campus_location else None,
            car_type=driver_rsvp.car_type or "",
            car_color=driver_rsvp.car_color or "",
            capacity=carpool.capacity,
        ),
        riders=[
            CarpoolRiderOut(
                rsvp_id=rider.rsvp_id,
                name=rider.user.name,
                email=rider.user.email,
                phone_number=rider.user.phone_number,
                campus_location=rider.campus_location.value if rider.campus_location else None,
            )
            for rider in members
        ],
    )


def load_carpool_views(db: Session, event_id: str) -> list[CarpoolOut]:
    return [_carpool_view(db, carpool) for carpool in event_carpools(db, event_id)]


@board_only
def get_carpools(db: Session, actor: User, event_id: str) -> list[CarpoolOut]:
    get_event_or_404(db, event_id)
    return load_carpool_views(db, event_id)


@board_only
def finalize_carpools(db: Session, actor: User, event_id: str) -> FinalizeCarpoolsResult:
    """Lock every carpool of the event. Unassigned riders do not block this."""
    get_event_or_404(db, event_id)
    with atomic(db):
        carpools = event_carpools(db, event_id)
        for carpool in carpools:
            carpool.status = CarpoolStatus.finalized
    logger.info("Finalized %d carpools for event %s by %s", len(carpools), event_id, actor.user_id)
    return FinalizeCarpoolsResult(carpools_finalized=len(carpools))
