"""Site appearance settings."""

from .service import SiteSettingsService, ThemeSettingsForm

__all__ = ["SiteSettingsService", "ThemeSettingsForm"]
