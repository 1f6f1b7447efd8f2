"""RSVP deduplication: one RSVP per person, latest wins."""
import logging
from typing import Iterable, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")


def _is_newer(candidate, current) -> bool:
    """True if ``candidate`` supersedes ``current``.

    Ordered by creation timestamp; equal timestamps fall back to the record id
    so the outcome does not depend on retrieval order.
    """
    return (candidate.created_at, candidate.rsvp_id) > (current.created_at, current.rsvp_id)


def deduplicate_by_user(rsvps: Iterable[R]) -> list[R]:
    """Collapse RSVPs sharing a ``user_id`` into the most recent one.

    Pure function. Each person keeps the slot of their first appearance in the
    input, so feeding RSVPs in registration order yields registration order.
    """
    by_user: dict[str, R] = {}
    total = 0
    for rsvp in rsvps:
        total += 1
        existing = by_user.get(rsvp.user_id)
        if existing is None or _is_newer(rsvp, existing):
            by_user[rsvp.user_id] = rsvp

    if total != len(by_user):
        logger.debug("Collapsed %d RSVPs into %d unique attendees", total, len(by_user))
    return list(by_user.values())
