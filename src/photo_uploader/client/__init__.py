"""Client-side selection, preview and upload state."""

from .controller import UploadController, UploadState
from .messages import MessageMode, StatusChannel
from .previews import PreviewHandle, PreviewRegistry
from .selection import FileBlob, FormMirror, SelectedItem, SelectionStore, identity_key

__all__ = [
    "FileBlob",
    "FormMirror",
    "MessageMode",
    "PreviewHandle",
    "PreviewRegistry",
    "SelectedItem",
    "SelectionStore",
    "StatusChannel",
    "UploadController",
    "UploadState",
    "identity_key",
]
