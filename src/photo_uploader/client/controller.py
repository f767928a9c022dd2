"""Single-flight submit lifecycle for the current selection."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from ..exceptions import TransportError
from ..logging_config import get_logger
from ..models import FileDescriptor
from .messages import StatusChannel
from .results import NETWORK_FAILURE_TEXT, interpret_response, render_result_html
from .selection import FileBlob, SelectionStore
from .transport import ProgressCallback, post_file

logger = get_logger(__name__)

Transport = Callable[[FileBlob, ProgressCallback], Tuple[int, Optional[Any]]]
Scheduler = Callable[[float, Callable[[], None]], None]

PROGRESS_HIDE_DELAY = 0.6


class UploadState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def timer_scheduler(delay: float, callback: Callable[[], None]) -> None:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()


def http_transport(endpoint: str, timeout: float = 60.0) -> Transport:
    def _send(blob: FileBlob, on_progress: ProgressCallback) -> Tuple[int, Optional[Any]]:
        return post_file(endpoint, blob, on_progress, timeout=timeout)

    return _send


class UploadController:
    """Drives ``Idle -> Submitting -> {Succeeded, Failed} -> Idle``.

    ``begin`` performs the synchronous part of a submit and returns the payload
    blob, or ``None`` when nothing was started. ``run`` performs the network
    call and settles the attempt. ``submit`` chains both for callers that can
    block. The trigger is disabled for as long as the state is ``SUBMITTING``,
    so a second ``begin`` during an upload is refused.
    """

    def __init__(
        self,
        store: SelectionStore,
        transport: Transport,
        *,
        scheduler: Scheduler = timer_scheduler,
        hide_delay: float = PROGRESS_HIDE_DELAY,
    ) -> None:
        self.store = store
        self.status: StatusChannel = store.status
        self.transport = transport
        self.scheduler = scheduler
        self.hide_delay = hide_delay
        self.state = UploadState.IDLE
        self.last_state = UploadState.IDLE
        self.result_files: List[FileDescriptor] = []
        self.result_html = ""
        self.result_ready = False
        self._lock = threading.Lock()

    @property
    def trigger_enabled(self) -> bool:
        return self.state is not UploadState.SUBMITTING

    def begin(self) -> Optional[FileBlob]:
        with self._lock:
            if self.state is not UploadState.IDLE:
                return None
            self.status.clear()
            self.result_files = []
            self.result_html = ""
            self.result_ready = False
            first = self.store.first()
            if first is None:
                self.status.error("Please select an image.")
                return None
            self.state = UploadState.SUBMITTING
        self.status.info("Uploading…")
        self.status.show_progress(0)
        return first.file

    def run(self, blob: FileBlob) -> UploadState:
        try:
            status_code, body = self.transport(blob, self.status.show_progress)
        except TransportError as exc:
            logger.warning("Upload transport failure for {}: {}", blob.name, exc)
            return self._settle(UploadState.FAILED, error=NETWORK_FAILURE_TEXT)
        except Exception:
            self._settle(UploadState.FAILED, error=NETWORK_FAILURE_TEXT)
            raise

        outcome = interpret_response(status_code, body)
        if not outcome.succeeded:
            logger.warning("Upload of {} rejected with status {}: {}", blob.name, status_code, outcome.error)
            return self._settle(UploadState.FAILED, error=outcome.error)

        self.result_files = outcome.files
        self.result_html = render_result_html(outcome.files)
        self.result_ready = True
        self.store.clear_all()
        logger.info("Uploaded {} as {} file(s)", blob.name, len(outcome.files))
        return self._settle(UploadState.SUCCEEDED)

    def submit(self) -> UploadState:
        blob = self.begin()
        if blob is None:
            return self.state
        return self.run(blob)

    def _settle(self, terminal: UploadState, error: Optional[str] = None) -> UploadState:
        if terminal is UploadState.SUCCEEDED:
            self.status.success("Upload succeeded!")
        else:
            self.status.error(error or NETWORK_FAILURE_TEXT)
        with self._lock:
            self.last_state = terminal
            self.state = UploadState.IDLE
        self.scheduler(self.hide_delay, self.status.hide_progress)
        return terminal
