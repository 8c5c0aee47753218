"""Transactional email client backed by Resend."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Optional

import resend
from tenacity import retry, stop_after_attempt, wait_exponential, before_sleep_log

from ictirc.models.enums import PaperStatus
from ictirc.utils.logger import get_logger

log = get_logger(__name__)
_tenacity_logger = logging.getLogger(__name__)

_STATUS_SUBJECTS = {
    PaperStatus.UNDER_REVIEW: "Your Paper is Under Review",
    PaperStatus.ACCEPTED: "Your Paper has been Accepted",
    PaperStatus.REJECTED: "Decision on Your Submission",
    PaperStatus.PUBLISHED: "Your Paper has been Published",
}


@dataclass(frozen=True)
class StatusChangeEmail:
    """Payload for a status-change notification to the corresponding author."""

    to: str
    paper_title: str
    author_name: str
    submission_id: str
    new_status: PaperStatus
    doi: Optional[str] = None
    notify_admin: bool = True


@dataclass(frozen=True)
class SubmissionConfirmationEmail:
    to: str
    paper_title: str
    author_name: str
    submission_id: str
    submitted_at: datetime


class EmailClient:
    """Sends journal emails through the Resend API."""

    def __init__(self, api_key: str, sender: str, admin_email: Optional[str] = None):
        self.sender = sender
        self.admin_email = admin_email or None
        self._configured = bool(api_key)
        if api_key:
            resend.api_key = api_key

    def is_configured(self) -> bool:
        return self._configured

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        before_sleep=before_sleep_log(_tenacity_logger, logging.WARNING),
        reraise=True,
    )
    def _send_with_retry(self, params: dict) -> dict:
        return resend.Emails.send(params)

    async def _send(self, to: list[str], subject: str, html: str) -> Optional[str]:
        """Send one message; returns the provider message id."""
        if not self._configured:
            log.warning("email skipped, resend not configured", subject=subject)
            return None
        params = {"from": self.sender, "to": to, "subject": subject, "html": html}
        response = await asyncio.to_thread(self._send_with_retry, params)
        message_id = response.get("id") if isinstance(response, dict) else None
        log.info("email sent", subject=subject, recipients=len(to), message_id=message_id)
        return message_id

    async def send_status_change_email(self, email: StatusChangeEmail) -> Optional[str]:
        subject = f"[IRJICT] {_STATUS_SUBJECTS.get(email.new_status, 'Status Update')}: {email.paper_title}"
        lines = [
            f"<p>Dear {escape(email.author_name)},</p>",
            f"<p>The status of your submission <strong>{escape(email.paper_title)}</strong> "
            f"is now <strong>{escape(str(email.new_status))}</strong>.</p>",
            f"<p>Submission ID: {escape(email.submission_id)}</p>",
        ]
        if email.doi:
            lines.append(f"<p>DOI: {escape(email.doi)}</p>")
        recipients = [email.to]
        if email.notify_admin and self.admin_email:
            recipients.append(self.admin_email)
        return await self._send(recipients, subject, "\n".join(lines))

    async def send_submission_confirmation(
        self, email: SubmissionConfirmationEmail
    ) -> Optional[str]:
        subject = f"[IRJICT] Submission Received: {email.paper_title}"
        html = "\n".join(
            [
                f"<p>Dear {escape(email.author_name)},</p>",
                f"<p>We have received your submission <strong>{escape(email.paper_title)}</strong>.</p>",
                f"<p>Submission ID: {escape(email.submission_id)}<br>"
                f"Received: {email.submitted_at.isoformat()}</p>",
            ]
        )
        return await self._send([email.to], subject, html)
