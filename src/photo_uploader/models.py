"""Pydantic models for the upload endpoint contract."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class FileDescriptor(BaseModel):
    """A stored object as reported back to the client."""

    name: str = Field(..., description="Original filename")
    path: Optional[str] = Field(None, description="Object path inside the bucket")
    url: str = Field(..., description="Public URL of the stored object")


class UploadResponse(BaseModel):
    """Successful upload body.

    ``files`` is the canonical shape. A body carrying a single ``file`` object
    is folded into ``files`` so callers only ever deal with a list.
    """

    success: bool = True
    message: Optional[str] = None
    files: List[FileDescriptor] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _fold_single_file(cls, data):
        if isinstance(data, dict) and data.get("file") and not data.get("files"):
            data = dict(data)
            data["files"] = [data.pop("file")]
        return data


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
