"""Object storage relay backed by Supabase Storage."""

from __future__ import annotations

import time
from typing import Optional

from supabase import Client, create_client

from .config import Settings, get_settings
from .exceptions import StorageNotConfiguredError, StorageUploadError
from .logging_config import get_logger

logger = get_logger(__name__)


def unique_object_name(filename: str, now: Optional[float] = None) -> str:
    """Prefix ``filename`` with the current epoch milliseconds."""
    timestamp = int((time.time() if now is None else now) * 1000)
    return f"{timestamp}-{filename}"


class StorageBackend:
    """Uploads bytes into a single bucket and resolves public URLs."""

    def __init__(self, client: Client, bucket: str) -> None:
        self._client = client
        self.bucket = bucket

    def upload(self, object_name: str, data: bytes, content_type: str) -> str:
        try:
            response = self._client.storage.from_(self.bucket).upload(
                path=object_name,
                file=data,
                file_options={"content-type": content_type, "upsert": "false"},
            )
        except Exception as exc:
            logger.error("Storage upload failed for {}/{}: {}", self.bucket, object_name, exc)
            raise StorageUploadError(f"Upload failed: {exc}", object_name) from exc
        path = getattr(response, "path", None) or object_name
        logger.info("Stored {}/{}", self.bucket, path)
        return path

    def public_url(self, path: str) -> str:
        return self._client.storage.from_(self.bucket).get_public_url(path)


_backend: Optional[StorageBackend] = None


def get_storage(settings: Optional[Settings] = None) -> StorageBackend:
    """Return the process-wide backend, creating it on first use."""
    global _backend
    if _backend is None:
        settings = settings or get_settings()
        if not settings.storage_configured:
            raise StorageNotConfiguredError()
        client = create_client(settings.supabase_url, settings.supabase_key)
        _backend = StorageBackend(client, settings.supabase_bucket)
        logger.info("Supabase client initialized for bucket {}", settings.supabase_bucket)
    return _backend


def reset_storage() -> None:
    global _backend
    _backend = None
