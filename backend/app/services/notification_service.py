"""Carpool notification dispatch: email every driver and rider of finalized carpools.

Messages are built from committed state first; only then are they handed to
a bounded thread pool. Each send succeeds or fails on its own: failures are
logged and counted, never retried, and never roll back other sends.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Optional

import pytz
from sqlalchemy.orm import Session

from app.auth import board_only
from app.config import settings
from app.emails.carpool_driver_email import DriverEmail, Passenger, driver_email_subject, render_driver_email
from app.emails.carpool_rider_email import CoRider, RiderEmail, render_rider_email, rider_email_subject
from app.emails.provider import EmailMessage, EmailProvider
from app.errors import EmailNotConfigured
from app.models.carpool import CarpoolStatus
from app.models.event import Event
from app.models.user import User
from app.schemas.carpool import CarpoolEmailsResult, CarpoolOut
from app.services.carpool_service import load_carpool_views
from app.services.event_service import get_event_or_404

logger = logging.getLogger(__name__)


def format_event_datetime(start_utc: datetime, tz_name: str) -> tuple[str, str]:
    """Render ("Saturday, March 1, 2025", "9:00 AM") in the club's timezone."""
    if start_utc.tzinfo is None:
        start_utc = pytz.utc.localize(start_utc)
    local = start_utc.astimezone(pytz.timezone(tz_name))
    date_text = f"{local:%A, %B} {local.day}, {local.year}"
    time_text = f"{local.hour % 12 or 12}:{local:%M %p}"
    return date_text, time_text


def build_carpool_messages(
    event: Event,
    carpools: list[CarpoolOut],
    event_date: str,
    event_time: str,
) -> list[EmailMessage]:
    """One message per driver and per rider of each finalized carpool."""
    club = settings.CLUB_NAME
    reply_to = settings.EMAIL_REPLY_TO
    messages = []

    for carpool in carpools:
        if carpool.status != CarpoolStatus.finalized.value:
            continue
        driver = carpool.driver

        driver_html = render_driver_email(
            DriverEmail(
                event_title=event.title,
                event_date=event_date,
                event_time=event_time,
                event_location=event.location,
                driver_name=driver.name,
                car_color=driver.car_color,
                car_type=driver.car_type,
                capacity=driver.capacity,
                riders=[Passenger(r.name, r.email, r.phone_number) for r in carpool.riders],
            ),
            club,
            reply_to,
        )
        messages.append(EmailMessage(driver.email, driver_email_subject(event.title), driver_html))

        for rider in carpool.riders:
            rider_html = render_rider_email(
                RiderEmail(
                    event_title=event.title,
                    event_date=event_date,
                    event_time=event_time,
                    event_location=event.location,
                    rider_name=rider.name,
                    driver_name=driver.name,
                    driver_email=driver.email,
                    driver_phone_number=driver.phone_number,
                    car_color=driver.car_color,
                    car_type=driver.car_type,
                    other_riders=[
                        CoRider(other.name, other.phone_number)
                        for other in carpool.riders
                        if other.rsvp_id != rider.rsvp_id
                    ],
                ),
                club,
                reply_to,
            )
            messages.append(EmailMessage(rider.email, rider_email_subject(event.title), rider_html))

    return messages


def dispatch_emails(provider: EmailProvider, messages: list[EmailMessage], max_workers: int) -> tuple[int, int]:
    """Send concurrently; return (sent, failed)."""
    if not messages:
        return 0, 0

    sent = failed = 0
    workers = max(1, min(max_workers, len(messages)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {pool.submit(provider.send, message): message for message in messages}
        for future in as_completed(futures):
            message = futures[future]
            try:
                future.result()
                sent += 1
            except Exception:
                failed += 1
                logger.error("Failed to send carpool email to %s", message.to, exc_info=True)
    return sent, failed


@board_only
def send_carpool_emails(
    db: Session,
    actor: User,
    event_id: str,
    provider: Optional[EmailProvider],
    max_workers: Optional[int] = None,
) -> CarpoolEmailsResult:
    event = get_event_or_404(db, event_id)
    if provider is None:
        raise EmailNotConfigured("RESEND_API_KEY not configured")

    finalized = [c for c in load_carpool_views(db, event_id) if c.status == CarpoolStatus.finalized.value]
    event_date, event_time = format_event_datetime(event.start_time_utc, settings.CLUB_TIMEZONE)
    messages = build_carpool_messages(event, finalized, event_date, event_time)

    sent, failed = dispatch_emails(provider, messages, max_workers or settings.EMAIL_MAX_WORKERS)
    logger.info(
        "Carpool emails for event %s: %d sent, %d failed across %d finalized carpools",
        event_id, sent, failed, len(finalized),
    )
    return CarpoolEmailsResult(emails_sent=sent, emails_failed=failed, carpools_processed=len(finalized))
