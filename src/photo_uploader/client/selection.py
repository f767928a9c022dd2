"""The in-memory selection of files waiting to be uploaded."""

from __future__ import annotations

import mimetypes
import re
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from ..config import MAX_SIZE_BYTES
from ..logging_config import get_logger
from .messages import StatusChannel
from .previews import PreviewHandle, PreviewRegistry

logger = get_logger(__name__)

ALLOWED_TYPES = re.compile(r"^image/")


@dataclass(frozen=True)
class FileBlob:
    """Raw file as handed over by a picker or a drop."""

    name: str
    size: int
    mime_type: str
    last_modified: int
    data: bytes = field(default=b"", repr=False)

    @classmethod
    def from_path(cls, path: Path) -> "FileBlob":
        data = path.read_bytes()
        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(
            name=path.name,
            size=len(data),
            mime_type=mime_type,
            last_modified=int(path.stat().st_mtime * 1000),
            data=data,
        )


def identity_key(blob: FileBlob) -> str:
    return "|".join(str(part) for part in (blob.name, blob.size, blob.mime_type, blob.last_modified))


def format_bytes(size: float) -> str:
    units = ["B", "KB", "MB", "GB", "TB"]
    index = 0
    value = float(size)
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    decimals = 1 if value < 10 and index else 0
    return f"{value:.{decimals}f} {units[index]}"


@dataclass
class SelectedItem:
    file: FileBlob
    preview: PreviewHandle
    key: str


class FormMirror:
    """Form-compatible file list kept in step with the selection.

    A whole-form submission reads ``files`` and so always sees the complete
    selection, even though the upload controller only sends the first item.
    """

    def __init__(self) -> None:
        self.files: Tuple[FileBlob, ...] = ()

    def sync(self, items: Iterable[SelectedItem]) -> None:
        self.files = tuple(item.file for item in items)

    def __len__(self) -> int:
        return len(self.files)


class SelectionStore:
    """Owns the ordered selection and every preview handle allocated for it.

    Mutations go through ``add_files``, ``remove_one`` and ``clear_all`` only.
    Handles are released in ``_release`` and nowhere else. Dash request
    threads and the upload worker share one store, so every read and
    mutation of ``_items`` holds ``_lock``.
    """

    def __init__(
        self,
        status: StatusChannel,
        registry: PreviewRegistry,
        *,
        max_size_bytes: int = MAX_SIZE_BYTES,
        mirror: Optional[FormMirror] = None,
    ) -> None:
        self.status = status
        self.registry = registry
        self.max_size_bytes = max_size_bytes
        self.mirror = mirror if mirror is not None else FormMirror()
        self._items: List[SelectedItem] = []
        self._lock = threading.Lock()

    @property
    def items(self) -> Tuple[SelectedItem, ...]:
        with self._lock:
            return tuple(self._items)

    def keys(self) -> List[str]:
        with self._lock:
            return [item.key for item in self._items]

    def first(self) -> Optional[SelectedItem]:
        with self._lock:
            return self._items[0] if self._items else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[SelectedItem]:
        return iter(self.items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return self._index_of(key) is not None

    def add_files(self, candidates: Iterable[FileBlob]) -> int:
        added = 0
        with self._lock:
            for blob in candidates:
                if not ALLOWED_TYPES.match(blob.mime_type or ""):
                    logger.info("Rejected non-image file {} ({})", blob.name, blob.mime_type)
                    self.status.error(f"Only image files can be added: {blob.name}")
                    continue
                if blob.size > self.max_size_bytes:
                    logger.info("Rejected oversized file {} ({} bytes)", blob.name, blob.size)
                    self.status.error(f"File too large (max {format_bytes(self.max_size_bytes)}): {blob.name}")
                    continue
                key = identity_key(blob)
                if self._index_of(key) is not None:
                    continue
                handle = self.registry.create(blob.data, blob.mime_type)
                self._items.append(SelectedItem(file=blob, preview=handle, key=key))
                added += 1

            if added:
                self._sync()
                self.status.info(f"Added {added} file(s).")
        return added

    def remove_one(self, key: str) -> bool:
        with self._lock:
            index = self._index_of(key)
            if index is None:
                return False
            self._release(self._items.pop(index))
            self._sync()
            self.status.info("Removed 1 file.")
        return True

    def clear_all(self) -> None:
        with self._lock:
            items, self._items = self._items, []
            for item in items:
                self._release(item)
            self._sync()

    close = clear_all

    def _index_of(self, key: object) -> Optional[int]:
        return next((i for i, item in enumerate(self._items) if item.key == key), None)

    def _release(self, item: SelectedItem) -> None:
        item.preview.revoke()

    def _sync(self) -> None:
        self.mirror.sync(self._items)
