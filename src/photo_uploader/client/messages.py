"""Single-slot status display shared by the client components."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Tuple

HISTORY_LIMIT = 100


class MessageMode(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class StatusSnapshot:
    text: str
    mode: MessageMode
    progress: int
    progress_visible: bool


class StatusChannel:
    """Holds the current message and the progress indicator.

    Each ``show_*`` call replaces the previous message. ``history`` keeps the
    most recent ``history_limit`` messages, which lets a headless caller echo
    them and collect the per-file errors emitted within one batch.
    """

    def __init__(self, history_limit: int = HISTORY_LIMIT) -> None:
        self._lock = threading.Lock()
        self.text = ""
        self.mode = MessageMode.INFO
        self.progress = 0
        self.progress_visible = False
        self.history: Deque[Tuple[MessageMode, str]] = deque(maxlen=history_limit)
        self.shown = 0

    def _show(self, mode: MessageMode, text: str) -> None:
        with self._lock:
            self.mode = mode
            self.text = text
            self.history.append((mode, text))
            self.shown += 1

    def info(self, text: str) -> None:
        self._show(MessageMode.INFO, text)

    def success(self, text: str) -> None:
        self._show(MessageMode.SUCCESS, text)

    def error(self, text: str) -> None:
        self._show(MessageMode.ERROR, text)

    def clear(self) -> None:
        with self._lock:
            self.mode = MessageMode.INFO
            self.text = ""

    def show_progress(self, percent: int) -> None:
        with self._lock:
            self.progress = max(0, min(100, int(percent)))
            self.progress_visible = True

    def hide_progress(self) -> None:
        with self._lock:
            self.progress_visible = False

    def errors(self) -> List[str]:
        with self._lock:
            return [text for mode, text in self.history if mode is MessageMode.ERROR]

    def snapshot(self) -> StatusSnapshot:
        with self._lock:
            return StatusSnapshot(self.text, self.mode, self.progress, self.progress_visible)

    def since(self, mark: int) -> Tuple[int, List[Tuple[MessageMode, str]]]:
        """Messages shown after ``mark`` that are still retained, and the new mark."""
        with self._lock:
            fresh = min(self.shown - mark, len(self.history))
            entries = list(self.history)[len(self.history) - fresh:] if fresh > 0 else []
            return self.shown, entries
