"""Command line interface for the photo uploader."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import requests
import typer

from .client.controller import UploadController, UploadState, http_transport
from .client.messages import MessageMode, StatusChannel
from .client.previews import PreviewRegistry
from .client.selection import FileBlob, SelectionStore
from .config import get_settings
from .logging_config import get_logger

app = typer.Typer(add_completion=False, no_args_is_help=True)
logger = get_logger(__name__)

MESSAGE_COLOURS = {
    MessageMode.INFO: None,
    MessageMode.SUCCESS: typer.colors.GREEN,
    MessageMode.ERROR: typer.colors.RED,
}


def _resolve_path(path: Path) -> Path:
    path = path.expanduser().resolve()
    if not path.is_file():
        raise typer.BadParameter(f"File not found: {path}")
    return path


def _run_now(_delay: float, callback) -> None:
    callback()


class _Echo:
    """Prints status messages that appeared since the previous flush."""

    def __init__(self, status: StatusChannel) -> None:
        self.status = status
        self._seen = 0

    def flush(self) -> None:
        self._seen, entries = self.status.since(self._seen)
        for mode, text in entries:
            typer.secho(text, fg=MESSAGE_COLOURS[mode])


@app.command("upload")
def upload(
    files: List[Path] = typer.Argument(..., help="Image files to upload, one request per file."),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", "-e", help="Upload endpoint URL."),
) -> None:
    """Validate and upload images through the relay endpoint."""
    settings = get_settings()
    target = endpoint or settings.upload_endpoint
    status = StatusChannel()
    store = SelectionStore(status, PreviewRegistry(), max_size_bytes=settings.max_upload_bytes)
    controller = UploadController(
        store,
        http_transport(target, timeout=settings.upload_timeout_seconds),
        scheduler=_run_now,
    )
    echo = _Echo(status)

    failures = 0
    for path in files:
        blob = FileBlob.from_path(_resolve_path(path))
        added = store.add_files([blob])
        echo.flush()
        if not added:
            failures += 1
            continue
        outcome = controller.submit()
        echo.flush()
        if outcome is UploadState.SUCCEEDED:
            for descriptor in controller.result_files:
                typer.echo(f"  {descriptor.name}: {descriptor.url}")
        else:
            failures += 1
            store.clear_all()

    logger.info("CLI upload finished", endpoint=target, files=len(files), failures=failures)
    if failures:
        raise typer.Exit(code=1)


@app.command("health")
def health(
    base_url: str = typer.Option("http://127.0.0.1:8080", "--base-url", help="Relay base URL."),
) -> None:
    """Query the relay health check."""
    try:
        response = requests.get(f"{base_url.rstrip('/')}/health", timeout=10)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        typer.secho(f"Health check failed: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    typer.secho(f"status: {payload.get('status')}", fg=typer.colors.GREEN)


@app.command("serve-api")
def serve_api(
    host: str = typer.Option("0.0.0.0", help="Host to bind the API server."),
    port: Optional[int] = typer.Option(None, help="Port to bind the API server (defaults to PORT)."),
    reload: bool = typer.Option(False, help="Enable auto-reload (development only)."),
) -> None:
    """Launch the upload relay via uvicorn."""
    import uvicorn

    bind_port = port or get_settings().port
    typer.echo(f"Starting photo uploader API on {host}:{bind_port} ...")
    uvicorn.run("photo_uploader.api:create_app", host=host, port=bind_port, reload=reload, factory=True)


@app.command("serve-ui")
def serve_ui(
    host: str = typer.Option("127.0.0.1", help="Host to bind the Dash server."),
    port: int = typer.Option(8050, help="Port to bind the Dash server."),
    debug: bool = typer.Option(False, help="Enable Dash debug mode."),
) -> None:
    """Launch the browser client."""
    from .app import create_app

    typer.echo(f"Starting photo uploader UI on {host}:{port} ...")
    create_app().run(host=host, port=port, debug=debug)


def main() -> None:
    """Entry point for setuptools."""
    app()


if __name__ == "__main__":
    main()
