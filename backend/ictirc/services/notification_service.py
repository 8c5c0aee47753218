"""Fire-and-forget author notifications.

Runs after the request transaction has committed. Delivery failures are
logged and never propagate to the caller.
"""

from ictirc.clients.email_client import (
    EmailClient,
    StatusChangeEmail,
    SubmissionConfirmationEmail,
)
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class NotificationService:
    def __init__(self, email_client: EmailClient):
        self.email_client = email_client

    async def notify_status_change(self, email: StatusChangeEmail) -> bool:
        try:
            await self.email_client.send_status_change_email(email)
        except Exception as e:
            log.error(
                "status change email failed",
                paper_id=email.submission_id,
                status=str(email.new_status),
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
        return True

    async def notify_submission_received(self, email: SubmissionConfirmationEmail) -> bool:
        try:
            await self.email_client.send_submission_confirmation(email)
        except Exception as e:
            log.error(
                "submission confirmation email failed",
                paper_id=email.submission_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
        return True
