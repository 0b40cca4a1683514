"""JSON-file key-value store standing in for the browser's local storage."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger


class LocalStore:
    """Persist a flat JSON object to a single file.

    The file is read once when the store is created. Every mutation rewrites
    the whole file through a temporary file and an atomic rename. A missing,
    unreadable or corrupt file is logged and treated as empty.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data: dict[str, Any] = self._read()

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._write()

    def remove(self, key: str) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        self._write()
        return True

    def keys(self) -> list[str]:
        return list(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            logger.error("Error loading local storage from {}: {}", self.path, exc)
            return {}
        if not isinstance(raw, dict):
            logger.error("Local storage at {} is not a JSON object; ignoring it", self.path)
            return {}
        return raw

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".storage-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(self._data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Local storage written to {}", self.path)


__all__ = ["LocalStore"]
