"""Supabase hot-storage client for manuscript uploads."""

import asyncio
from dataclasses import dataclass
from typing import Optional

from supabase import Client, create_client

from ictirc.utils.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class UploadResult:
    success: bool
    path: str
    url: Optional[str] = None
    error: Optional[str] = None


class StorageClient:
    """Uploads manuscripts to the hot-storage bucket.

    The Supabase SDK is synchronous, so each call runs in a worker thread.
    Failures are reported through ``UploadResult`` rather than raised.
    """

    def __init__(self, url: str, service_key: str, bucket: str):
        self.bucket = bucket
        self._client: Optional[Client] = None
        self._url = url
        self._service_key = service_key

    def _get_client(self) -> Client:
        if self._client is None:
            self._client = create_client(self._url, self._service_key)
        return self._client

    def _upload(self, data: bytes, path: str, content_type: str, upsert: bool) -> str:
        bucket = self._get_client().storage.from_(self.bucket)
        # storage3 expects header values as strings
        bucket.upload(path, data, {"content-type": content_type, "upsert": "true" if upsert else "false"})
        return bucket.get_public_url(path)

    async def upload_to_hot_storage(
        self,
        data: bytes,
        path: str,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> UploadResult:
        try:
            url = await asyncio.to_thread(self._upload, data, path, content_type, upsert)
        except Exception as e:
            log.error("hot storage upload failed", path=path, error=str(e), error_type=type(e).__name__)
            return UploadResult(success=False, path=path, error=str(e))
        log.info("hot storage upload complete", path=path, size=len(data))
        return UploadResult(success=True, path=path, url=url)

    def _remove(self, path: str) -> None:
        self._get_client().storage.from_(self.bucket).remove([path])

    async def delete_from_hot_storage(self, path: str) -> bool:
        """Remove an uploaded object. Returns False if the delete failed."""
        try:
            await asyncio.to_thread(self._remove, path)
        except Exception as e:
            log.error("hot storage delete failed", path=path, error=str(e), error_type=type(e).__name__)
            return False
        log.info("hot storage object removed", path=path)
        return True
