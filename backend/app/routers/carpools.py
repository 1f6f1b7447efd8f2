"""Carpool API routes, all board only."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.emails.provider import EmailProvider, get_email_provider
from app.models.user import User
from app.schemas.carpool import (
    CarpoolAssignmentUpdate,
    CarpoolEmailsResult,
    CarpoolOut,
    FinalizeCarpoolsResult,
    GenerateCarpoolsResult,
    ReassignRiderRequest,
    ReassignRiderResult,
)
from app.services import assignment_service, carpool_service, notification_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/events/{event_id}/carpools/generate", response_model=GenerateCarpoolsResult)
def generate_carpools(
    event_id: str,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
):
    """Rebuild the draft carpools of an offsite event from its RSVPs."""
    return carpool_service.generate_carpools(db, actor, event_id)


@router.get("/events/{event_id}/carpools", response_model=list[CarpoolOut])
def get_carpools(
    event_id: str,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
):
    return carpool_service.get_carpools(db, actor, event_id)


@router.patch("/carpools/{carpool_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_carpool_assignment(
    carpool_id: str,
    payload: CarpoolAssignmentUpdate,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
):
    """Remove and/or add riders on a draft carpool."""
    assignment_service.update_carpool_assignment(
        db,
        actor,
        carpool_id,
        add_rsvp_ids=payload.add_rsvp_ids,
        remove_rsvp_ids=payload.remove_rsvp_ids,
    )


@router.post("/events/{event_id}/carpools/reassign", response_model=ReassignRiderResult)
def reassign_rider(
    event_id: str,
    payload: ReassignRiderRequest,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
):
    """Move a rider between carpools, or unseat them when no target is given."""
    return assignment_service.reassign_rider(
        db,
        actor,
        event_id,
        payload.rider_rsvp_id,
        from_carpool_id=payload.from_carpool_id,
        to_carpool_id=payload.to_carpool_id,
    )


@router.post("/events/{event_id}/carpools/finalize", response_model=FinalizeCarpoolsResult)
def finalize_carpools(
    event_id: str,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
):
    return carpool_service.finalize_carpools(db, actor, event_id)


@router.post("/events/{event_id}/carpools/emails", response_model=CarpoolEmailsResult)
def send_carpool_emails(
    event_id: str,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
    provider: Optional[EmailProvider] = Depends(get_email_provider),
):
    """Email every driver and rider of the event's finalized carpools."""
    return notification_service.send_carpool_emails(db, actor, event_id, provider)
