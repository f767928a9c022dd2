"""Dash application factory for the photo uploader."""

from __future__ import annotations

from typing import Optional

import dash_bootstrap_components as dbc
from dash import Dash
from flask import Response, abort

from ..background import JobManager
from ..client.controller import UploadController, http_transport
from ..client.messages import StatusChannel
from ..client.previews import PREVIEW_ROUTE, PreviewRegistry
from ..client.selection import SelectionStore
from ..config import Settings, get_settings
from ..exceptions import PreviewHandleError
from .callbacks import UIContext, register_callbacks
from .constants import SESSION_LIMIT
from .layout import build_layout
from .preview import PreviewRenderer
from .state import SessionRegistry, UploadSession


def session_factory(settings: Settings, previews: PreviewRegistry):
    transport = http_transport(settings.upload_endpoint, timeout=settings.upload_timeout_seconds)

    def _build(session_id: str) -> UploadSession:
        status = StatusChannel()
        store = SelectionStore(status, previews, max_size_bytes=settings.max_upload_bytes)
        controller = UploadController(store, transport, hide_delay=settings.progress_hide_delay_seconds)
        return UploadSession(
            session_id=session_id,
            status=status,
            store=store,
            renderer=PreviewRenderer(store),
            controller=controller,
        )

    return _build


def register_preview_route(app: Dash, previews: PreviewRegistry) -> None:
    @app.server.route(f"{PREVIEW_ROUTE}/<token>")
    def serve_preview(token: str):
        handle = previews.lookup(token)
        if handle is None:
            abort(404)
        try:
            data = handle.data
        except PreviewHandleError:
            abort(404)
        return Response(data, mimetype=handle.mime_type, headers={"Cache-Control": "no-store"})


def create_app(settings: Optional[Settings] = None, previews: Optional[PreviewRegistry] = None) -> Dash:
    settings = settings or get_settings()
    previews = previews if previews is not None else PreviewRegistry()
    app = Dash(__name__, external_stylesheets=[dbc.themes.FLATLY], suppress_callback_exceptions=True)
    app.title = "Photo Uploader"
    app.layout = build_layout
    context = UIContext(
        sessions=SessionRegistry(session_factory(settings, previews), limit=SESSION_LIMIT),
        jobs=JobManager(max_workers=4),
    )
    register_callbacks(app, context)
    register_preview_route(app, previews)
    return app
