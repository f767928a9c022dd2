"""Dash layout composition."""

from __future__ import annotations

import uuid

import dash_bootstrap_components as dbc
from dash import dcc, html
from dash.development.base_component import Component

from . import ids
from .constants import ACCEPTED_TYPES, POLL_INTERVAL_MS


def build_layout() -> Component:
    """Compose the upload page. Called per page load so each load gets a fresh session."""
    return html.Div(
        [
            dcc.Store(id=ids.STORE_SESSION, data=uuid.uuid4().hex),
            dcc.Interval(id=ids.INTERVAL_UPLOAD, interval=POLL_INTERVAL_MS, n_intervals=0, disabled=True),
            dbc.Container(
                dbc.Card(
                    dbc.CardBody(
                        [
                            html.H4("Upload Photos", className="section-title"),
                            html.P(
                                "Pick images or drop them below. Each file may be up to 10 MB.",
                                className="section-subtitle",
                            ),
                            _dropzone(),
                            html.Div(id=ids.PREVIEW_LIST, className="preview-list"),
                            html.Div(id=ids.MESSAGE, className="msg"),
                            dbc.Progress(id=ids.PROGRESS, value=0, style={"display": "none"}, className="mt-2"),
                            html.Div(
                                [
                                    dbc.Button("Upload", id=ids.BUTTON_SUBMIT, color="primary", className="me-2"),
                                    dbc.Button("Clear all", id=ids.BUTTON_CLEAR, color="secondary", outline=True),
                                ],
                                className="mt-3",
                            ),
                            html.Div(id=ids.RESULT, className="mt-3 result"),
                        ]
                    ),
                    className="upload-card",
                ),
                className="content-container",
            ),
        ],
        className="app-root",
    )


def _dropzone() -> Component:
    return dcc.Upload(
        id=ids.UPLOAD_PHOTOS,
        multiple=True,
        accept=ACCEPTED_TYPES,
        children=html.Div(
            [
                html.Span("Drop photos here", className="upload-label"),
                html.Small(" or click to browse", className="upload-hint"),
            ],
            className="upload-inner",
        ),
        className="upload-dropzone",
    )
