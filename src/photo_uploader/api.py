"""FastAPI surface: receives photos and relays them to object storage."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile, status
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .exceptions import StorageNotConfiguredError
from .logging_config import get_logger
from .models import FileDescriptor, HealthResponse, UploadResponse
from .storage import StorageBackend, get_storage, unique_object_name

logger = get_logger(__name__)


class UploadFailed(Exception):
    """Terminal failure of an upload request, rendered as ``{"error": ...}``."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def storage_dependency() -> StorageBackend:
    return get_storage()


def _stage(upload: UploadFile, staging_dir: Path) -> Path:
    with tempfile.NamedTemporaryFile(dir=staging_dir, prefix="upload_", delete=False) as handle:
        shutil.copyfileobj(upload.file, handle)
        return Path(handle.name)


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.error("Failed to delete staged file {}: {}", path, exc)


def relay_file(upload: UploadFile, storage: StorageBackend, staging_dir: Path) -> FileDescriptor:
    """Stage one upload on disk, forward it to storage, always drop the staged copy."""
    filename = upload.filename or "unnamed"
    staged = _stage(upload, staging_dir)
    try:
        data = staged.read_bytes()
        object_name = unique_object_name(filename)
        path = storage.upload(object_name, data, upload.content_type or "application/octet-stream")
    finally:
        _discard(staged)
    return FileDescriptor(name=filename, path=path, url=storage.public_url(path))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    settings.uploads_dir.mkdir(parents=True, exist_ok=True)
    app = FastAPI(title="Photo Uploader API", version="0.1.0")

    logger.info(
        "Environment check",
        has_url=bool(settings.supabase_url),
        has_key=bool(settings.supabase_key),
        bucket=settings.supabase_bucket,
        environment=settings.environment,
    )
    if not settings.storage_configured:
        logger.warning("SUPABASE_URL and SUPABASE_KEY not set. Upload functionality will not work.")

    @app.exception_handler(StorageNotConfiguredError)
    def _storage_missing(_request: Request, exc: StorageNotConfiguredError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)})

    @app.exception_handler(UploadFailed)
    def _upload_failed(_request: Request, exc: UploadFailed) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.post("/upload", response_model=UploadResponse)
    def upload(
        photo: Optional[UploadFile] = File(None),
        photos: Optional[List[UploadFile]] = File(None, alias="photos[]"),
        storage: StorageBackend = Depends(storage_dependency),
    ) -> UploadResponse:
        uploads = [photo] if photo is not None else list(photos or [])
        if not uploads:
            raise UploadFailed("No file was selected", status.HTTP_400_BAD_REQUEST)

        stored: List[FileDescriptor] = []
        try:
            for item in uploads:
                stored.append(relay_file(item, storage, settings.uploads_dir))
        except Exception as exc:
            logger.error("Upload error: {}", exc)
            raise UploadFailed("Upload failed") from exc

        logger.info("Uploaded {} file(s)", len(stored))
        return UploadResponse(success=True, message="Upload succeeded", files=stored)

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="ok")

    return app
