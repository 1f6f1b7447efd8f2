"""User profile API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth import get_current_user, require_board_member
from app.database import get_db
from app.errors import Conflict, NotFound
from app.models.user import User, UserRole
from app.schemas.user import PhoneNumberUpdate, UserCreate, UserOut

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    """Provision a profile. Called by the auth provider after sign-up."""
    if db.query(User).filter(User.email == payload.email).first():
        raise Conflict("A profile with this email already exists")
    role = payload.role

    user = User(name=payload.name, email=payload.email, phone_number=payload.phone_number, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s (%s) as %s", user.user_id, user.email, role.value)
    return user


@router.get("/me", response_model=UserOut)
def get_me(actor: User = Depends(get_current_user)):
    return actor


@router.patch("/me/phone", response_model=UserOut)
def update_phone_number(
    payload: PhoneNumberUpdate,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
):
    """Set or clear the caller's phone number (shown to carpool partners)."""
    actor.phone_number = payload.phone_number or None
    db.commit()
    db.refresh(actor)
    logger.info("Updated phone number for user %s", actor.user_id)
    return actor


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db), actor: User = Depends(get_current_user)):
    """Fetch a single profile (board only)."""
    require_board_member(actor)
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


@router.post("/{user_id}/promote", response_model=UserOut)
def promote_to_board(user_id: str, db: Session = Depends(get_db), actor: User = Depends(get_current_user)):
    """Grant the board role (board only)."""
    require_board_member(actor)
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFound("User not found")
    user.role = UserRole.board
    db.commit()
    db.refresh(user)
    logger.info("User %s promoted to board by %s", user_id, actor.user_id)
    return user
