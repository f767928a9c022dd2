"""Dash callbacks wiring browser events to the upload session."""

from __future__ import annotations

import base64
import binascii
import mimetypes
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import dash
from dash import Dash, Input, Output, State, callback_context, html
from dash.dependencies import ALL

from ..background import JobManager
from ..client.controller import UploadController
from ..client.results import COMPLETED_TEXT
from ..client.selection import FileBlob
from ..logging_config import get_logger
from . import ids
from .constants import MESSAGE_CLASSES
from .state import SessionRegistry, UploadSession

logger = get_logger(__name__)


@dataclass
class UIContext:
    sessions: SessionRegistry
    jobs: JobManager


def decode_upload(contents: str, filename: str, last_modified: Optional[float]) -> Optional[FileBlob]:
    """Turn one ``dcc.Upload`` data URL into a :class:`FileBlob`."""
    try:
        header, encoded = contents.split(",", 1)
        data = base64.b64decode(encoded)
    except (ValueError, binascii.Error):
        logger.warning("Discarding unreadable upload payload for {}", filename)
        return None
    mime_type = header[len("data:"):].split(";", 1)[0] if header.startswith("data:") else ""
    if not mime_type:
        mime_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    modified_ms = int(float(last_modified) * 1000) if last_modified is not None else 0
    return FileBlob(name=filename, size=len(data), mime_type=mime_type, last_modified=modified_ms, data=data)


def decode_uploads(
    contents: Optional[Sequence[str]],
    filenames: Optional[Sequence[str]],
    last_modified: Optional[Sequence[float]],
) -> List[FileBlob]:
    if not contents:
        return []
    filenames = list(filenames or [])
    stamps = list(last_modified or [])
    blobs: List[FileBlob] = []
    for index, payload in enumerate(contents):
        name = filenames[index] if index < len(filenames) else f"upload-{index}"
        stamp = stamps[index] if index < len(stamps) else None
        blob = decode_upload(payload, name, stamp)
        if blob is not None:
            blobs.append(blob)
    return blobs


def result_children(controller: UploadController):
    """Result panel as components, so file names are shown as plain text."""
    if not controller.result_ready:
        return None
    files = controller.result_files
    if not files:
        return COMPLETED_TEXT
    links = [html.A(item.name, href=item.url, target="_blank", rel="noopener") for item in files]
    if len(links) == 1:
        return links[0]
    return html.Ul([html.Li(link) for link in links])


def session_outputs(session: UploadSession):
    """Project a session onto the page's output properties."""
    snapshot = session.status.snapshot()
    controller = session.controller
    busy = not controller.trigger_enabled
    return (
        session.renderer.render(),
        snapshot.text,
        MESSAGE_CLASSES[snapshot.mode],
        snapshot.progress,
        {"display": "block" if snapshot.progress_visible else "none"},
        busy,
        result_children(controller),
        not (busy or snapshot.progress_visible),
    )


def dispatch_event(context: UIContext, session: UploadSession, triggered: Any, value: Any, upload: tuple) -> None:
    if triggered == ids.UPLOAD_PHOTOS:
        session.store.add_files(decode_uploads(*upload))
    elif isinstance(triggered, dict) and triggered.get("type") == ids.THUMB_REMOVE:
        if value:
            session.renderer.activate(triggered["key"])
    elif triggered == ids.BUTTON_SUBMIT:
        blob = session.controller.begin()
        if blob is not None:
            context.jobs.submit(session.controller.run, blob)
    elif triggered == ids.BUTTON_CLEAR:
        session.store.clear_all()


def register_callbacks(app: Dash, context: UIContext) -> None:
    @app.callback(
        Output(ids.PREVIEW_LIST, "children"),
        Output(ids.MESSAGE, "children"),
        Output(ids.MESSAGE, "className"),
        Output(ids.PROGRESS, "value"),
        Output(ids.PROGRESS, "style"),
        Output(ids.BUTTON_SUBMIT, "disabled"),
        Output(ids.RESULT, "children"),
        Output(ids.INTERVAL_UPLOAD, "disabled"),
        Input(ids.UPLOAD_PHOTOS, "contents"),
        Input({"type": ids.THUMB_REMOVE, "key": ALL}, "n_clicks"),
        Input(ids.BUTTON_SUBMIT, "n_clicks"),
        Input(ids.BUTTON_CLEAR, "n_clicks"),
        Input(ids.INTERVAL_UPLOAD, "n_intervals"),
        State(ids.UPLOAD_PHOTOS, "filename"),
        State(ids.UPLOAD_PHOTOS, "last_modified"),
        State(ids.STORE_SESSION, "data"),
        prevent_initial_call=True,
    )
    def handle_event(contents, _remove_clicks, _submit_clicks, _clear_clicks, _tick, filenames, last_modified, session_id):
        if not session_id or not callback_context.triggered:
            raise dash.exceptions.PreventUpdate

        session = context.sessions.get(session_id)
        value = callback_context.triggered[0].get("value")
        dispatch_event(context, session, callback_context.triggered_id, value, (contents, filenames, last_modified))
        return session_outputs(session)

