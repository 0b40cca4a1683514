"""Configuration namespace for bloghub."""

from __future__ import annotations

from .app import AppConfig
from .backend import BackendConfig
from .base import BaseConfig, load_config
from .storage import StorageConfig
from .utils import expand_path, resolve_env_reference
from .web import WebUIConfig

__all__ = [
    "BaseConfig",
    "AppConfig",
    "load_config",
    "BackendConfig",
    "StorageConfig",
    "WebUIConfig",
    "expand_path",
    "resolve_env_reference",
]
