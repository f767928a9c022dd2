"""Application configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_SIZE_BYTES = 10 * 1024 * 1024


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_bucket: str = "photos"
    uploads_dir: Path = Path("uploads")
    logs_dir: Path = Path("logs")
    max_upload_bytes: int = MAX_SIZE_BYTES
    upload_endpoint: str = "http://127.0.0.1:8080/upload"
    upload_timeout_seconds: float = 60.0
    progress_hide_delay_seconds: float = 0.6
    port: int = 8080
    environment: str = Field(default="development", validation_alias="APP_ENV")

    @property
    def storage_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


@lru_cache(1)
def get_settings() -> Settings:
    settings = Settings()
    settings.uploads_dir.mkdir(parents=True, exist_ok=True)
    settings.logs_dir.mkdir(parents=True, exist_ok=True)
    return settings
