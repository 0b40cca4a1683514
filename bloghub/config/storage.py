"""Device-local storage settings (reading list and appearance)."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field

from bloghub.config.base import BaseConfig


class StorageConfig(BaseConfig):
    """Location and keys of the local key-value file."""

    path: Path = Field(
        Path("~/.bloghub/storage.json"),
        description="JSON file acting as the reader's local storage",
    )
    bookmark_limit: int = Field(10, ge=1, le=100, description="Maximum saved articles")
    bookmarks_key: str = Field("bookmarks", min_length=1, description="Key holding the bookmark list")
    theme_key: str = Field("bloghub-theme", min_length=1, description="Key holding the theme mode")
    color_key: str = Field("bloghub-color", min_length=1, description="Key holding the theme colour")


__all__ = ["StorageConfig"]
