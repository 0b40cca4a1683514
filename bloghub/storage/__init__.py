"""Device-local state: the key-value file, the reading list and appearance."""

from .bookmarks import DEFAULT_LIMIT, BookmarkStore
from .local import LocalStore
from .theme import THEME_COLORS, THEME_MODES, ThemePreferences

__all__ = [
    "LocalStore",
    "BookmarkStore",
    "DEFAULT_LIMIT",
    "ThemePreferences",
    "THEME_MODES",
    "THEME_COLORS",
]
