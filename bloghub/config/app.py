"""Application-level configuration models."""

from __future__ import annotations

from pydantic import Field

from bloghub.config.backend import BackendConfig
from bloghub.config.base import BaseConfig
from bloghub.config.storage import StorageConfig
from bloghub.config.web import WebUIConfig


class AppConfig(BaseConfig):
    """Top-level runtime configuration for the entire application."""

    logging_level: str = Field("INFO", description="Log level: DEBUG, INFO, WARNING, ERROR")
    backend: BackendConfig | None = Field(None, description="Hosted backend connection")
    storage: StorageConfig = Field(default_factory=StorageConfig, description="Local reader storage")
    web: WebUIConfig = Field(default_factory=WebUIConfig, description="Site and admin console")


__all__ = ["AppConfig"]
