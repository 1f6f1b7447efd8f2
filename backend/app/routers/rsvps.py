"""RSVP API routes: the caller's own registration and transportation intent."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.rsvp import RsvpCreate, RsvpOut
from app.services import rsvp_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=RsvpOut, status_code=status.HTTP_200_OK)
def upsert_rsvp(
    payload: RsvpCreate,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
):
    """Create or update the caller's RSVP for an event."""
    rsvp = rsvp_service.upsert_rsvp(db, actor, payload)
    return rsvp_service.to_rsvp_out(rsvp)


@router.get("/mine", response_model=list[RsvpOut])
def list_my_rsvps(db: Session = Depends(get_db), actor: User = Depends(get_current_user)):
    return [rsvp_service.to_rsvp_out(r) for r in rsvp_service.list_user_rsvps(db, actor)]


@router.delete("/{rsvp_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rsvp(
    rsvp_id: str,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
):
    """Delete an RSVP (its owner or a board member)."""
    rsvp_service.delete_rsvp(db, actor, rsvp_id)
