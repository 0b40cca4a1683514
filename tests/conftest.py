"""Shared fixtures: sample backend rows and an in-memory backend."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from bloghub.notifications import Notifier  # noqa: E402
from tests.fakes import FakeBackendClient, article_row  # noqa: E402


@pytest.fixture()
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture()
def backend() -> FakeBackendClient:
    return FakeBackendClient(
        {
            "articles": [
                article_row(1),
                article_row(2, category="CSS", tags=["css"]),
                article_row(3, tags=["state"]),
                article_row(4, published=False, title="Draft about hooks"),
            ],
            "admins": [{"id": "adm1", "username": "admin", "password": "admin123"}],
            "comments": [],
            "comment_replies": [],
            "site_settings": [],
        }
    )
