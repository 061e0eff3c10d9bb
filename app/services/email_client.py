# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""HTTP client that dispatches event announcements through SendGrid."""
from typing import Any, Dict, List

import httpx

from app.core.config import settings
from app.core.logging import get_logger
from app.metrics import EMAILS_SENT

logger = get_logger(__name__)


class EmailDeliveryError(Exception):
    """The mail provider rejected or never received the request."""


def parse_recipients(recipients: str) -> List[str]:
    """Split a comma-separated recipient string, dropping blanks."""
    return [r.strip() for r in recipients.split(",") if r.strip()]


class EmailClient:
    def __init__(self, api_key: str = settings.SENDGRID_API_KEY,
                 api_url: str = settings.SENDGRID_API_URL,
                 sender: str = settings.EMAIL_FROM,
                 sender_name: str = settings.EMAIL_FROM_NAME,
                 timeout: float = settings.EMAIL_TIMEOUT):
        self._api_key = api_key
        self._api_url = api_url
        self._sender = sender
        self._sender_name = sender_name
        self._timeout = timeout

    def build_message(self, recipients: List[str], subject: str, body: str) -> Dict[str, Any]:
        # One personalization per recipient so addresses are not disclosed to each other.
        return {
            "personalizations": [{"to": [{"email": r}]} for r in recipients],
            "from": {"email": self._sender, "name": self._sender_name},
            "subject": f"{settings.EMAIL_SUBJECT_PREFIX}{subject}",
            "content": [{"type": "text/html", "value": f"<p>{body}</p>"}],
        }

    def send_announcement(self, recipients: List[str], subject: str, body: str) -> None:
        if not self._api_key:
            EMAILS_SENT.labels(status="failed").inc()
            raise EmailDeliveryError("SendGrid API key is not configured")
        message = self.build_message(recipients, subject, body)
        try:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.post(
                    self._api_url,
                    json=message,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            EMAILS_SENT.labels(status="failed").inc()
            raise EmailDeliveryError(str(exc)) from exc
        EMAILS_SENT.labels(status="sent").inc()
        logger.info("Announcement sent to %d recipients", len(recipients))
