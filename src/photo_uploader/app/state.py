"""Per-page-load upload sessions for the Dash app."""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from ..client.controller import UploadController
from ..client.messages import StatusChannel
from ..client.selection import SelectionStore
from ..logging_config import get_logger
from .preview import PreviewRenderer

logger = get_logger(__name__)


@dataclass
class UploadSession:
    session_id: str
    status: StatusChannel
    store: SelectionStore
    renderer: PreviewRenderer
    controller: UploadController

    def close(self) -> None:
        self.store.close()


SessionFactory = Callable[[str], UploadSession]


class SessionRegistry:
    """Keeps the most recent sessions alive and tears down the rest."""

    def __init__(self, factory: SessionFactory, limit: int = 200) -> None:
        self._factory = factory
        self._limit = limit
        self._sessions: "OrderedDict[str, UploadSession]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> UploadSession:
        evicted = []
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = self._factory(session_id)
                self._sessions[session_id] = session
            self._sessions.move_to_end(session_id)
            while len(self._sessions) > self._limit:
                _, oldest = self._sessions.popitem(last=False)
                evicted.append(oldest)
        for stale in evicted:
            logger.info("Tearing down idle session {}", stale.session_id)
            stale.close()
        return session

    def discard(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            session.close()

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
