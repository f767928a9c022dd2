"""Interpretation and rendering of upload endpoint responses."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import ValidationError

from ..models import FileDescriptor, UploadResponse

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"
COMPLETED_TEXT = "Done."
NETWORK_FAILURE_TEXT = "Upload failed. Please check your network connection."


@lru_cache(1)
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )


@dataclass
class UploadOutcome:
    succeeded: bool
    files: List[FileDescriptor]
    error: Optional[str] = None


def _coerce_descriptor(raw: Any) -> FileDescriptor:
    raw = raw if isinstance(raw, dict) else {}
    return FileDescriptor(
        name=str(raw.get("name") or "(no-name)"),
        path=raw.get("path"),
        url=str(raw.get("url") or "#"),
    )


def interpret_response(status_code: Optional[int], body: Any) -> UploadOutcome:
    """Decide success or failure from an HTTP status and a parsed body."""
    data = body if isinstance(body, dict) else None
    in_range = status_code is not None and 200 <= status_code < 300
    if in_range and data is not None and data.get("success"):
        try:
            parsed = UploadResponse.model_validate(data)
            files = parsed.files
        except ValidationError:
            files = [_coerce_descriptor(item) for item in _raw_files(data)]
        return UploadOutcome(succeeded=True, files=files)

    error = data.get("error") if data is not None else None
    return UploadOutcome(succeeded=False, files=[], error=str(error) if error else NETWORK_FAILURE_TEXT)


def _raw_files(data: dict) -> List[Any]:
    if isinstance(data.get("files"), list):
        return data["files"]
    if data.get("file"):
        return [data["file"]]
    return []


def render_result_html(files: List[FileDescriptor]) -> str:
    template = _environment().get_template("upload_result.html")
    return template.render(files=files, fallback=COMPLETED_TEXT)
