"""Background execution of upload requests for the Dash callbacks."""

from __future__ import annotations

import threading
import time
import uuid
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, Optional

from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class JobSnapshot:
    job_id: str
    status: str
    submitted_at: float
    finished_at: Optional[float] = None
    exception: Optional[str] = None


class JobNotFoundError(KeyError):
    """Raised when a job cannot be located in the manager history."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job '{job_id}' not found")
        self.job_id = job_id


class JobManager:
    """Runs callables on a thread pool and remembers the most recent outcomes."""

    def __init__(self, max_workers: int = 4, *, history_limit: int = 50) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="upload")
        self._futures: Dict[str, Future[Any]] = {}
        self._snapshots: Dict[str, JobSnapshot] = {}
        self._history: Deque[str] = deque()
        self._history_limit = history_limit
        self._lock = threading.Lock()

    def submit(
        self,
        func: Callable[..., Any],
        *args: Any,
        on_complete: Optional[Callable[[JobSnapshot], None]] = None,
    ) -> str:
        job_id = uuid.uuid4().hex
        snapshot = JobSnapshot(job_id=job_id, status="running", submitted_at=time.time())
        with self._lock:
            self._snapshots[job_id] = snapshot
            future = self._executor.submit(func, *args)
            self._futures[job_id] = future
        future.add_done_callback(lambda done: self._finalise(job_id, done, on_complete))
        return job_id

    def _finalise(
        self,
        job_id: str,
        future: Future[Any],
        on_complete: Optional[Callable[[JobSnapshot], None]],
    ) -> None:
        error = future.exception()
        with self._lock:
            snapshot = self._snapshots.get(job_id)
            if snapshot is None:
                return
            snapshot.finished_at = time.time()
            snapshot.status = "failed" if error else "finished"
            snapshot.exception = str(error) if error else None
            self._history.append(job_id)
            while len(self._history) > self._history_limit:
                oldest = self._history.popleft()
                self._snapshots.pop(oldest, None)
                self._futures.pop(oldest, None)
        if error:
            logger.error("Background job {} failed: {}", job_id, error)
        if on_complete:
            try:
                on_complete(snapshot)
            except Exception:  # pragma: no cover - callbacks should not break the pool
                logger.exception("Job completion callback failed for {}", job_id)

    def status(self, job_id: str) -> str:
        with self._lock:
            snapshot = self._snapshots.get(job_id)
            return snapshot.status if snapshot else "unknown"

    def result(self, job_id: str, timeout: Optional[float] = None) -> Any:
        with self._lock:
            future = self._futures.get(job_id)
        if future is None:
            raise JobNotFoundError(job_id)
        return future.result(timeout=timeout)
