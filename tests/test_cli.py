from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from photo_uploader import cli
from photo_uploader.exceptions import TransportError

from .conftest import FakeTransport

runner = CliRunner()


def _write_png(path: Path) -> Path:
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 32)
    return path


def test_upload_prints_public_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    transport = FakeTransport(body={"success": True, "files": [{"name": "a.png", "url": "https://x/a.png"}]})
    endpoints = []

    def _fake_http_transport(endpoint, timeout=60.0):
        endpoints.append(endpoint)
        return transport

    monkeypatch.setattr(cli, "http_transport", _fake_http_transport)
    photo = _write_png(tmp_path / "a.png")

    result = runner.invoke(cli.app, ["upload", str(photo), "--endpoint", "http://relay/upload"])

    assert result.exit_code == 0, result.output
    assert "Upload succeeded!" in result.output
    assert "https://x/a.png" in result.output
    assert endpoints == ["http://relay/upload"]
    assert [blob.name for blob in transport.sent] == ["a.png"]


def test_upload_sends_one_request_per_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    transport = FakeTransport()
    monkeypatch.setattr(cli, "http_transport", lambda endpoint, timeout=60.0: transport)
    first = _write_png(tmp_path / "first.png")
    second = _write_png(tmp_path / "second.png")

    result = runner.invoke(cli.app, ["upload", str(first), str(second)])

    assert result.exit_code == 0, result.output
    assert [blob.name for blob in transport.sent] == ["first.png", "second.png"]


def test_upload_rejects_non_images(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    transport = FakeTransport()
    monkeypatch.setattr(cli, "http_transport", lambda endpoint, timeout=60.0: transport)
    notes = tmp_path / "notes.txt"
    notes.write_text("hello")

    result = runner.invoke(cli.app, ["upload", str(notes)])

    assert result.exit_code == 1
    assert "Only image files can be added: notes.txt" in result.output
    assert transport.sent == []


def test_upload_reports_network_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    transport = FakeTransport(error=TransportError("refused"), progress=())
    monkeypatch.setattr(cli, "http_transport", lambda endpoint, timeout=60.0: transport)

    result = runner.invoke(cli.app, ["upload", str(_write_png(tmp_path / "a.png"))])

    assert result.exit_code == 1
    assert "check your network connection" in result.output


def test_health_command(monkeypatch: pytest.MonkeyPatch):
    class _Response:
        def raise_for_status(self):
            return None

        def json(self):
            return {"status": "ok"}

    monkeypatch.setattr(cli.requests, "get", lambda url, timeout: _Response())

    result = runner.invoke(cli.app, ["health", "--base-url", "http://relay"])

    assert result.exit_code == 0
    assert "status: ok" in result.output
