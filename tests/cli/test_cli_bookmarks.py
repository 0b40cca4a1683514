from __future__ import annotations

import json

import pytest

from bloghub.cli import CLIState, main
from tests.fakes import FakeBackendClient

from .utils import logger_to_stderr, patch_backend, write_config


@pytest.fixture()
def config_file(tmp_path, monkeypatch, backend: FakeBackendClient) -> str:
    patch_backend(monkeypatch, backend)
    return str(write_config(tmp_path))


def _stored(tmp_path) -> list[dict]:
    return json.loads((tmp_path / "storage.json").read_text(encoding="utf-8"))["bookmarks"]


def test_add_and_list(capsys, tmp_path, config_file, backend: FakeBackendClient):
    with logger_to_stderr():
        assert main(["--config", config_file, "bookmarks", "add", "article-number-2"]) == 0
        assert main(["--config", config_file, "bookmarks", "list"]) == 0

    captured = capsys.readouterr()
    assert 'Saved "Article number 2" to your reading list' in captured.err
    assert "a2\tarticle-number-2\tCSS\tArticle number 2" in captured.out
    assert [entry["id"] for entry in _stored(tmp_path)] == ["a2"]
    assert ("rpc", "increment_view_count") not in backend.calls


def test_add_duplicate_is_reported(capsys, tmp_path, config_file):
    main(["--config", config_file, "bookmarks", "add", "article-number-1"])

    with logger_to_stderr():
        assert main(["--config", config_file, "bookmarks", "add", "article-number-1"]) == 0

    assert "already in your reading list" in capsys.readouterr().err
    assert len(_stored(tmp_path)) == 1


def test_add_when_full_fails(capsys, tmp_path, monkeypatch, backend: FakeBackendClient):
    patch_backend(monkeypatch, backend)
    config_file = str(write_config(tmp_path, bookmark_limit=1))
    main(["--config", config_file, "bookmarks", "add", "article-number-1"])

    with logger_to_stderr():
        assert main(["--config", config_file, "bookmarks", "add", "article-number-2"]) == 1

    assert "Reading list is full" in capsys.readouterr().err
    assert [entry["id"] for entry in _stored(tmp_path)] == ["a1"]


def test_add_unknown_article(capsys, config_file):
    with logger_to_stderr():
        assert main(["--config", config_file, "bookmarks", "add", "missing-article"]) == 1

    assert "Article 'missing-article' not found" in capsys.readouterr().err


def test_remove_by_id_or_slug(tmp_path, config_file):
    main(["--config", config_file, "bookmarks", "add", "article-number-1"])
    main(["--config", config_file, "bookmarks", "add", "article-number-2"])

    assert main(["--config", config_file, "bookmarks", "remove", "a1"]) == 0
    assert main(["--config", config_file, "bookmarks", "remove", "article-number-2"]) == 0
    assert _stored(tmp_path) == []


def test_remove_unknown(capsys, config_file):
    with logger_to_stderr():
        assert main(["--config", config_file, "bookmarks", "remove", "a9"]) == 1

    assert "'a9' is not in your reading list" in capsys.readouterr().err


def test_toggle_twice(tmp_path, config_file, backend: FakeBackendClient):
    assert main(["--config", config_file, "bookmarks", "toggle", "article-number-3"]) == 0
    assert [entry["id"] for entry in _stored(tmp_path)] == ["a3"]

    backend.failing.add("articles")
    assert main(["--config", config_file, "bookmarks", "toggle", "article-number-3"]) == 0
    assert _stored(tmp_path) == []


def test_toggle_when_full_fails_like_add(capsys, tmp_path, monkeypatch, backend: FakeBackendClient):
    patch_backend(monkeypatch, backend)
    config_file = str(write_config(tmp_path, bookmark_limit=1))
    main(["--config", config_file, "bookmarks", "add", "article-number-1"])

    with logger_to_stderr():
        add_code = main(["--config", config_file, "bookmarks", "add", "article-number-2"])
        toggle_code = main(["--config", config_file, "bookmarks", "toggle", "article-number-2"])

    assert add_code == toggle_code == 1
    assert "Reading list is full" in capsys.readouterr().err
    assert [entry["id"] for entry in _stored(tmp_path)] == ["a1"]


def test_notifications_are_drained_after_each_command(capsys, monkeypatch, config_file):
    states: list[CLIState] = []

    class RecordingState(CLIState):
        def __init__(self, *args, **kwargs) -> None:
            super().__init__(*args, **kwargs)
            states.append(self)

    monkeypatch.setattr("bloghub.cli.CLIState", RecordingState)

    with logger_to_stderr():
        assert main(["--config", config_file, "bookmarks", "add", "article-number-1"]) == 0
        assert main(["--config", config_file, "bookmarks", "remove", "missing"]) == 1

    assert "Saved \"Article number 1\" to your reading list" in capsys.readouterr().err
    assert len(states) == 2
    assert all(state.notifier.pending == [] for state in states)


def test_clear(capsys, tmp_path, config_file):
    main(["--config", config_file, "bookmarks", "add", "article-number-1"])

    with logger_to_stderr():
        assert main(["--config", config_file, "bookmarks", "clear"]) == 0
        assert main(["--config", config_file, "bookmarks", "list"]) == 0

    err = capsys.readouterr().err
    assert "Reading list cleared" in err
    assert "Your reading list is empty." in err
    assert "bookmarks" not in json.loads((tmp_path / "storage.json").read_text(encoding="utf-8"))


def test_list_filters_by_category(capsys, config_file):
    main(["--config", config_file, "bookmarks", "add", "article-number-1"])
    main(["--config", config_file, "bookmarks", "add", "article-number-2"])
    capsys.readouterr()

    assert main(["--config", config_file, "bookmarks", "list", "--category", "React"]) == 0

    assert capsys.readouterr().out.strip().splitlines() == ["a1\tarticle-number-1\tReact\tArticle number 1"]
