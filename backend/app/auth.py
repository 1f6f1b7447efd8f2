"""Authorization: current-user resolution and the board-member gate.

Authentication itself belongs to the external auth provider; its gateway
forwards the authenticated profile id in the ``X-User-Id`` header.
"""
import functools
import logging
from typing import Callable, Optional, TypeVar

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import NotAuthenticated, Unauthorized
from app.models.user import User

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller's profile or fail with NotAuthenticated."""
    if not x_user_id:
        raise NotAuthenticated("Not authenticated")
    user = db.query(User).filter(User.user_id == x_user_id).first()
    if not user:
        raise NotAuthenticated("User profile not found")
    return user


def require_board_member(user: User) -> User:
    if not user.is_board:
        logger.warning("User %s denied board-only action", user.user_id)
        raise Unauthorized("Only board members can perform this action")
    return user


def board_only(func: F) -> F:
    """Gate a service entry point called as ``func(db, actor, ...)``."""

    @functools.wraps(func)
    def wrapper(db: Session, actor: User, *args, **kwargs):
        require_board_member(actor)
        return func(db, actor, *args, **kwargs)

    return wrapper  # type: ignore[return-value]
