"""Appearance preferences (light/dark mode and accent colour)."""

from __future__ import annotations

from typing import Literal, get_args

from loguru import logger

from bloghub.storage.local import LocalStore

ThemeMode = Literal["light", "dark", "system"]
ThemeColor = Literal["blue", "purple", "green", "orange", "pink", "default"]

THEME_MODES: tuple[str, ...] = get_args(ThemeMode)
THEME_COLORS: tuple[str, ...] = get_args(ThemeColor)


class ThemePreferences:
    """Read and write the reader's appearance choices in the local store.

    Stored values that are not recognised fall back to the defaults, which
    are normally the site-wide settings chosen by the admin.
    """

    def __init__(
        self,
        store: LocalStore,
        *,
        theme_key: str = "bloghub-theme",
        color_key: str = "bloghub-color",
        default_theme: str = "system",
        default_color: str = "default",
    ) -> None:
        self.store = store
        self.theme_key = theme_key
        self.color_key = color_key
        self.default_theme = default_theme if default_theme in THEME_MODES else "system"
        self.default_color = default_color if default_color in THEME_COLORS else "default"

    @property
    def theme(self) -> str:
        return self._read(self.theme_key, THEME_MODES, self.default_theme)

    @property
    def color(self) -> str:
        return self._read(self.color_key, THEME_COLORS, self.default_color)

    def set_theme(self, theme: str) -> None:
        if theme not in THEME_MODES:
            raise ValueError(f"Unknown theme '{theme}'; choose one of {', '.join(THEME_MODES)}")
        self.store.set(self.theme_key, theme)

    def set_color(self, color: str) -> None:
        if color not in THEME_COLORS:
            raise ValueError(f"Unknown colour '{color}'; choose one of {', '.join(THEME_COLORS)}")
        self.store.set(self.color_key, color)

    def resolved_theme(self, system_prefers_dark: bool = False) -> str:
        theme = self.theme
        if theme == "system":
            return "dark" if system_prefers_dark else "light"
        return theme

    def css_classes(self, system_prefers_dark: bool = False) -> list[str]:
        return [self.resolved_theme(system_prefers_dark), f"theme-{self.color}"]

    def _read(self, key: str, allowed: tuple[str, ...], default: str) -> str:
        value = self.store.get(key)
        if value is None:
            return default
        if value not in allowed:
            logger.warning("Ignoring unknown stored value {!r} for '{}'", value, key)
            return default
        return value


__all__ = ["ThemePreferences", "ThemeMode", "ThemeColor", "THEME_MODES", "THEME_COLORS"]
