"""Email provider boundary: ``send(EmailMessage)`` raises on failure."""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import resend

from app.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str


class EmailProvider(Protocol):
    def send(self, message: EmailMessage) -> None: ...


class ResendEmailProvider:
    """Transactional email through the Resend API."""

    def __init__(self, api_key: str, sender: str, reply_to: str = ""):
        self.sender = sender
        self.reply_to = reply_to
        resend.api_key = api_key

    def send(self, message: EmailMessage) -> None:
        params = {
            "from": self.sender,
            "to": [message.to],
            "subject": message.subject,
            "html": message.html,
        }
        if self.reply_to:
            params["reply_to"] = self.reply_to
        response = resend.Emails.send(params)
        logger.info("Sent email to %s: %s (id=%s)", message.to, message.subject, response.get("id"))


def get_email_provider() -> Optional[EmailProvider]:
    """FastAPI dependency; None when no API key is configured.

    Tests override it with an in-memory provider.
    """
    if not settings.RESEND_API_KEY:
        return None
    return ResendEmailProvider(
        api_key=settings.RESEND_API_KEY,
        sender=settings.EMAIL_FROM,
        reply_to=settings.EMAIL_REPLY_TO,
    )
