from __future__ import annotations

from typing import Any, Callable, List, Optional, Tuple

import pytest

from photo_uploader.app.preview import PreviewRenderer
from photo_uploader.app.state import UploadSession
from photo_uploader.client.controller import UploadController
from photo_uploader.client.messages import StatusChannel
from photo_uploader.client.previews import PreviewRegistry
from photo_uploader.client.selection import FileBlob, SelectionStore
from photo_uploader.exceptions import TransportError

MB = 1024 * 1024


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch: pytest.MonkeyPatch):
    uploads_dir = tmp_path / "uploads"
    logs_dir = tmp_path / "logs"
    monkeypatch.setenv("UPLOADS_DIR", str(uploads_dir))
    monkeypatch.setenv("LOGS_DIR", str(logs_dir))
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_KEY", raising=False)

    from photo_uploader import config as config_module
    from photo_uploader import storage as storage_module

    config_module.get_settings.cache_clear()
    storage_module.reset_storage()
    yield config_module.get_settings()
    config_module.get_settings.cache_clear()
    storage_module.reset_storage()


def make_blob(
    name: str = "a.jpg",
    size: Optional[int] = None,
    mime_type: str = "image/jpeg",
    last_modified: int = 1_700_000_000_000,
    data: bytes = b"\xff\xd8\xff\xe0fake-jpeg",
) -> FileBlob:
    return FileBlob(
        name=name,
        size=len(data) if size is None else size,
        mime_type=mime_type,
        last_modified=last_modified,
        data=data,
    )


@pytest.fixture()
def blob_factory() -> Callable[..., FileBlob]:
    return make_blob


@pytest.fixture()
def status() -> StatusChannel:
    return StatusChannel()


@pytest.fixture()
def previews() -> PreviewRegistry:
    return PreviewRegistry()


@pytest.fixture()
def store(status: StatusChannel, previews: PreviewRegistry) -> SelectionStore:
    return SelectionStore(status, previews)


class FakeTransport:
    """Stands in for the HTTP call; records what was sent."""

    def __init__(
        self,
        status_code: int = 200,
        body: Any = None,
        *,
        progress: Tuple[int, ...] = (25, 50, 100),
        error: Optional[Exception] = None,
    ) -> None:
        self.status_code = status_code
        self.body = {"success": True, "files": []} if body is None else body
        self.progress = progress
        self.error = error
        self.sent: List[FileBlob] = []

    def __call__(self, blob: FileBlob, on_progress):
        self.sent.append(blob)
        for percent in self.progress:
            on_progress(percent)
        if self.error is not None:
            raise self.error
        return self.status_code, self.body


class ManualScheduler:
    def __init__(self) -> None:
        self.calls: List[Tuple[float, Callable[[], None]]] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> None:
        self.calls.append((delay, callback))

    def run_all(self) -> None:
        for _delay, callback in self.calls:
            callback()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def network_down() -> FakeTransport:
    return FakeTransport(error=TransportError("connection refused"), progress=())


def build_session_factory(previews, transport=None, scheduler=None):
    def _build(session_id: str) -> UploadSession:
        status = StatusChannel()
        store = SelectionStore(status, previews)
        controller = UploadController(
            store,
            transport or FakeTransport(),
            scheduler=scheduler or (lambda _delay, callback: callback()),
        )
        return UploadSession(session_id, status, store, PreviewRenderer(store), controller)

    return _build
