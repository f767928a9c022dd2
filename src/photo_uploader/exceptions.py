"""Custom exceptions for the photo uploader."""

from __future__ import annotations


class StorageNotConfiguredError(RuntimeError):
    """Raised when object storage credentials are missing."""

    def __init__(self, message: str = "Storage is not configured"):
        super().__init__(message)


class StorageUploadError(Exception):
    """Raised when the storage backend rejects a file."""

    def __init__(self, message: str, filename: str):
        super().__init__(message)
        self.filename = filename


class PreviewHandleError(RuntimeError):
    """Raised when a preview handle is revoked twice or read after revocation."""


class TransportError(Exception):
    """Raised when the upload request fails below the HTTP layer."""
