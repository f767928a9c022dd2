"""WSGI entrypoint for the Dash client."""

from __future__ import annotations

from photo_uploader.app import create_app

app = create_app()
server = app.server


if __name__ == "__main__":
    app.run(debug=True)
