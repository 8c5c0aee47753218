"""External service clients."""

from ictirc.clients.email_client import (
    EmailClient,
    StatusChangeEmail,
    SubmissionConfirmationEmail,
)
from ictirc.clients.storage_client import StorageClient, UploadResult

__all__ = [
    "EmailClient",
    "StatusChangeEmail",
    "SubmissionConfirmationEmail",
    "StorageClient",
    "UploadResult",
]
