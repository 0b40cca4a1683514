"""Helper utilities for configuration handling."""

from __future__ import annotations

import os
from pathlib import Path

_ENV_PREFIX = "env:"


def resolve_env_reference(value: str | None, *, required: bool = True) -> str | None:
    """Resolve values written as ``"env:VAR_NAME"``.

    Plain strings come back unchanged and ``None`` passes through. A missing or
    empty variable raises :class:`EnvironmentError` unless ``required`` is
    ``False``, in which case ``None`` is returned.
    """

    if value is None:
        return None
    if not value.startswith(_ENV_PREFIX):
        return value

    var_name = value.split(":", 1)[1]
    resolved = os.getenv(var_name)
    if resolved:
        return resolved
    if required:
        raise EnvironmentError(f"Environment variable '{var_name}' is not set or empty")
    return None


def expand_path(path: Path) -> Path:
    """Expand ``~`` and environment variables inside a configured path."""

    return Path(os.path.expandvars(str(path))).expanduser()


__all__ = ["resolve_env_reference", "expand_path"]
