from __future__ import annotations

import re
from typing import List, Tuple

import pytest
from fastapi.testclient import TestClient

from photo_uploader.api import create_app, storage_dependency
from photo_uploader.client.transport import encode_multipart
from photo_uploader.exceptions import StorageUploadError

from .conftest import make_blob


class FakeStorage:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.uploads: List[Tuple[str, bytes, str]] = []

    def upload(self, object_name: str, data: bytes, content_type: str) -> str:
        if self.fail:
            raise StorageUploadError("bucket rejected", object_name)
        self.uploads.append((object_name, data, content_type))
        return object_name

    def public_url(self, path: str) -> str:
        return f"https://storage.example/photos/{path}"


@pytest.fixture()
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def api_client(isolated_settings, fake_storage):
    app = create_app(isolated_settings)
    app.dependency_overrides[storage_dependency] = lambda: fake_storage
    return TestClient(app)


def _staged_files(settings) -> list:
    return list(settings.uploads_dir.iterdir())


def test_health(api_client: TestClient):
    response = api_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_single_photo_is_relayed(api_client: TestClient, fake_storage: FakeStorage, isolated_settings):
    response = api_client.post("/upload", files={"photo": ("a.jpg", b"JPEGDATA", "image/jpeg")})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Upload succeeded"
    [descriptor] = body["files"]
    assert descriptor["name"] == "a.jpg"
    assert re.fullmatch(r"\d+-a\.jpg", descriptor["path"])
    assert descriptor["url"] == f"https://storage.example/photos/{descriptor['path']}"

    [(object_name, data, content_type)] = fake_storage.uploads
    assert object_name == descriptor["path"]
    assert data == b"JPEGDATA"
    assert content_type == "image/jpeg"
    assert _staged_files(isolated_settings) == []


def test_multi_file_mode(api_client: TestClient, fake_storage: FakeStorage):
    response = api_client.post(
        "/upload",
        files=[
            ("photos[]", ("a.jpg", b"A", "image/jpeg")),
            ("photos[]", ("b.png", b"B", "image/png")),
        ],
    )

    assert response.status_code == 200
    assert [item["name"] for item in response.json()["files"]] == ["a.jpg", "b.png"]
    assert len(fake_storage.uploads) == 2


def test_missing_file_is_bad_request(api_client: TestClient):
    response = api_client.post("/upload", data={"note": "nothing attached"})

    assert response.status_code == 400
    assert response.json() == {"error": "No file was selected"}


def test_storage_failure_removes_staged_file(isolated_settings):
    app = create_app(isolated_settings)
    app.dependency_overrides[storage_dependency] = lambda: FakeStorage(fail=True)
    client = TestClient(app)

    response = client.post("/upload", files={"photo": ("a.jpg", b"JPEGDATA", "image/jpeg")})

    assert response.status_code == 500
    assert response.json() == {"error": "Upload failed"}
    assert _staged_files(isolated_settings) == []


def test_unconfigured_storage_fails_before_transfer(isolated_settings):
    client = TestClient(create_app(isolated_settings))

    response = client.post("/upload", files={"photo": ("a.jpg", b"JPEGDATA", "image/jpeg")})

    assert response.status_code == 500
    assert response.json() == {"error": "Storage is not configured"}
    assert _staged_files(isolated_settings) == []


def test_client_encoded_filename_with_line_breaks_is_stored_intact(api_client: TestClient, fake_storage: FakeStorage):
    blob = make_blob("evil\r\nContent-Type: text/html\r\n\r\nX.jpg", data=b"JPEGDATA")
    body, content_type = encode_multipart(blob)

    response = api_client.post("/upload", content=body, headers={"Content-Type": content_type})

    assert response.status_code == 200
    [(object_name, data, stored_type)] = fake_storage.uploads
    assert data == b"JPEGDATA"
    assert stored_type == "image/jpeg"
    assert "\r" not in object_name and "\n" not in object_name
    assert object_name.endswith("X.jpg")
