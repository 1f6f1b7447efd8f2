"""Event API routes: delegates to event_service for invariant enforcement."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.event import EventCreate, EventDetailOut, EventOut, ShiftCreate, ShiftOut
from app.services import event_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
):
    """Create an event (board only)."""
    return event_service.create_event(db, actor, payload)


@router.get("/{event_id}", response_model=EventDetailOut)
def get_event(
    event_id: str,
    db: Session = Depends(get_db),
    viewer: User = Depends(get_current_user),
):
    """Fetch an event with shifts and attendees; contact details for board only."""
    return event_service.get_event_detail(db, viewer, event_id)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
):
    """Delete an event and everything attached to it (board only)."""
    event_service.delete_event(db, actor, event_id)


@router.post("/{event_id}/shifts", response_model=ShiftOut, status_code=status.HTTP_201_CREATED)
def add_shift(
    event_id: str,
    payload: ShiftCreate,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
):
    return event_service.add_shift(db, actor, event_id, payload)
