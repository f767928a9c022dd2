"""Revocable preview URLs for selected files."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..exceptions import PreviewHandleError

PREVIEW_ROUTE = "/previews"


@dataclass(eq=False)
class PreviewHandle:
    """A local URL that serves one file's bytes until it is revoked."""

    token: str
    mime_type: str
    _data: Optional[bytes] = field(repr=False)
    _registry: "PreviewRegistry" = field(repr=False)

    @property
    def url(self) -> str:
        return f"{PREVIEW_ROUTE}/{self.token}"

    @property
    def revoked(self) -> bool:
        return self._data is None

    @property
    def data(self) -> bytes:
        if self._data is None:
            raise PreviewHandleError(f"Preview {self.token} has been revoked")
        return self._data

    def revoke(self) -> None:
        if self._data is None:
            raise PreviewHandleError(f"Preview {self.token} revoked twice")
        self._data = None
        self._registry._forget(self.token)


class PreviewRegistry:
    """Tracks every live preview handle so the web server can serve them."""

    def __init__(self) -> None:
        self._live: Dict[str, PreviewHandle] = {}
        self._lock = threading.Lock()

    def create(self, data: bytes, mime_type: str) -> PreviewHandle:
        handle = PreviewHandle(token=uuid.uuid4().hex, mime_type=mime_type, _data=data, _registry=self)
        with self._lock:
            self._live[handle.token] = handle
        return handle

    def lookup(self, token: str) -> Optional[PreviewHandle]:
        with self._lock:
            return self._live.get(token)

    def _forget(self, token: str) -> None:
        with self._lock:
            self._live.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._live)

    def __contains__(self, handle: object) -> bool:
        if not isinstance(handle, PreviewHandle):
            return False
        with self._lock:
            return self._live.get(handle.token) is handle
