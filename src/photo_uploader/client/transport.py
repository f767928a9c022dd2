"""HTTP transport for a single-file multipart upload with byte progress."""

from __future__ import annotations

import io
from typing import Any, Callable, Iterator, Optional, Tuple

import requests
from urllib3 import encode_multipart_formdata

from ..exceptions import TransportError
from .selection import FileBlob

ProgressCallback = Callable[[int], None]
UPLOAD_FIELD = "photo"
CHUNK_SIZE = 64 * 1024


def encode_multipart(blob: FileBlob, field_name: str = UPLOAD_FIELD) -> Tuple[bytes, str]:
    """Encode ``blob`` as a one-part form body; control characters in the name are percent-encoded."""
    return encode_multipart_formdata({field_name: (blob.name, blob.data, blob.mime_type)})


class ProgressReader:
    """File-like request body that reports percentages as it is consumed."""

    def __init__(self, payload: bytes, on_progress: Optional[ProgressCallback] = None) -> None:
        self._buffer = io.BytesIO(payload)
        self.total = len(payload)
        self.sent = 0
        self._on_progress = on_progress
        self._last = -1

    def __len__(self) -> int:
        return self.total

    def __iter__(self) -> Iterator[bytes]:
        while True:
            chunk = self.read(CHUNK_SIZE)
            if not chunk:
                return
            yield chunk

    def read(self, size: int = -1) -> bytes:
        chunk = self._buffer.read(size)
        if chunk:
            self.sent += len(chunk)
            self._report()
        return chunk

    def _report(self) -> None:
        if self._on_progress is None or not self.total:
            return
        percent = round(self.sent / self.total * 100)
        if percent > self._last:
            self._last = percent
            self._on_progress(percent)


def parse_body(response: requests.Response) -> Optional[Any]:
    try:
        return response.json()
    except ValueError:
        return None


def post_file(
    endpoint: str,
    blob: FileBlob,
    on_progress: Optional[ProgressCallback] = None,
    *,
    timeout: float = 60.0,
    session: Optional[requests.Session] = None,
) -> Tuple[int, Optional[Any]]:
    """POST ``blob`` as the ``photo`` field and return ``(status, parsed_body)``."""
    payload, content_type = encode_multipart(blob)
    body = ProgressReader(payload, on_progress)
    sender = session or requests
    try:
        response = sender.post(
            endpoint,
            data=body,
            headers={"Content-Type": content_type},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise TransportError(str(exc)) from exc
    return response.status_code, parse_body(response)
