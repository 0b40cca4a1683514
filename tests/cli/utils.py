"""Shared helpers for CLI tests."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path

from loguru import logger
from pytest import MonkeyPatch

from bloghub.notifications import Notifier
from bloghub.services import Services
from tests.fakes import FakeBackendClient


@contextmanager
def logger_to_stderr(level: str = "INFO"):
    """Temporarily route Loguru output to stderr for assertion."""

    handler_id = logger.add(sys.stderr, level=level)
    try:
        yield
    finally:
        logger.remove(handler_id)


def write_config(base_dir: Path, *, with_backend: bool = True, bookmark_limit: int = 10) -> Path:
    """Write a config file whose local storage lives under ``base_dir``."""

    lines = [
        'logging_level = "DEBUG"',
        "",
        "[storage]",
        f'path = "{(base_dir / "storage.json").as_posix()}"',
        f"bookmark_limit = {bookmark_limit}",
    ]
    if with_backend:
        lines += [
            "",
            "[backend]",
            'url = "https://demo.supabase.co"',
            'anon_key = "test-anon-key"',
        ]
    path = base_dir / "config.toml"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def patch_backend(monkeypatch: MonkeyPatch, backend: FakeBackendClient) -> None:
    """Make the CLI talk to ``backend`` instead of building an HTTP client."""

    def _fake_build_services(config: object, notifier: Notifier | None = None) -> Services:
        return Services.from_client(backend, notifier)  # type: ignore[arg-type]

    monkeypatch.setattr("bloghub.cli.build_services", _fake_build_services)
