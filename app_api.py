"""Uvicorn entrypoint for the photo upload relay."""

from __future__ import annotations

import uvicorn

from photo_uploader.config import get_settings


def main() -> None:
    uvicorn.run("photo_uploader.api:create_app", host="0.0.0.0", port=get_settings().port, factory=True)


if __name__ == "__main__":
    main()
