from __future__ import annotations

from pathlib import Path

import pytest

from bloghub.storage import LocalStore, ThemePreferences


@pytest.fixture()
def local(tmp_path: Path) -> LocalStore:
    return LocalStore(tmp_path / "storage.json")


def test_defaults_when_nothing_stored(local: LocalStore) -> None:
    prefs = ThemePreferences(local, default_theme="dark", default_color="purple")

    assert prefs.theme == "dark"
    assert prefs.color == "purple"


def test_invalid_defaults_fall_back(local: LocalStore) -> None:
    prefs = ThemePreferences(local, default_theme="neon", default_color="teal")

    assert prefs.theme == "system"
    assert prefs.color == "default"


def test_set_persists_under_configured_keys(local: LocalStore) -> None:
    prefs = ThemePreferences(local)
    prefs.set_theme("light")
    prefs.set_color("green")

    assert local.get("bloghub-theme") == "light"
    assert local.get("bloghub-color") == "green"
    assert ThemePreferences(local).theme == "light"


def test_set_rejects_unknown_values(local: LocalStore) -> None:
    prefs = ThemePreferences(local)

    with pytest.raises(ValueError):
        prefs.set_theme("sepia")
    with pytest.raises(ValueError):
        prefs.set_color("teal")
    assert local.keys() == []


def test_unknown_stored_value_uses_default(local: LocalStore) -> None:
    local.set("bloghub-theme", "sepia")

    assert ThemePreferences(local, default_theme="light").theme == "light"


def test_resolved_theme_and_classes(local: LocalStore) -> None:
    prefs = ThemePreferences(local)
    prefs.set_color("orange")

    assert prefs.resolved_theme(system_prefers_dark=True) == "dark"
    assert prefs.resolved_theme(system_prefers_dark=False) == "light"
    prefs.set_theme("dark")
    assert prefs.css_classes() == ["dark", "theme-orange"]
