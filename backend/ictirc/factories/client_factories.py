"""Factory functions for external service clients."""

from functools import lru_cache

from ictirc.config import get_settings
from ictirc.clients.email_client import EmailClient
from ictirc.clients.storage_client import StorageClient


@lru_cache(maxsize=1)
def get_email_client() -> EmailClient:
    """
    Create singleton Resend email client.

    Returns:
        EmailClient instance
    """
    settings = get_settings()
    return EmailClient(
        api_key=settings.resend_api_key,
        sender=settings.email_from,
        admin_email=settings.admin_notification_email,
    )


@lru_cache(maxsize=1)
def get_storage_client() -> StorageClient:
    """
    Create singleton Supabase storage client.

    Returns:
        StorageClient instance
    """
    settings = get_settings()
    return StorageClient(
        url=settings.supabase_url,
        service_key=settings.supabase_service_key,
        bucket=settings.supabase_hot_bucket,
    )
