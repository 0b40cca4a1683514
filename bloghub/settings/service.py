"""Site-wide appearance defaults chosen in the admin console."""

from __future__ import annotations

from datetime import datetime, timezone

from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator

from bloghub.backend.client import BackendClient
from bloghub.errors import BackendError
from bloghub.models import SiteSettings
from bloghub.notifications import Notifier
from bloghub.storage.theme import THEME_COLORS, THEME_MODES


class ThemeSettingsForm(BaseModel):
    model_config = ConfigDict(extra="forbid")

    default_theme: str
    default_theme_color: str

    @field_validator("default_theme")
    @classmethod
    def _theme(cls, value: str) -> str:
        if value not in THEME_MODES:
            raise ValueError(f"Theme must be one of {', '.join(THEME_MODES)}")
        return value

    @field_validator("default_theme_color")
    @classmethod
    def _color(cls, value: str) -> str:
        if value not in THEME_COLORS:
            raise ValueError(f"Colour must be one of {', '.join(THEME_COLORS)}")
        return value


class SiteSettingsService:
    """Reads and writes the single ``site_settings`` row."""

    TABLE = "site_settings"

    def __init__(self, client: BackendClient, notifier: Notifier | None = None) -> None:
        self.client = client
        self.notifier = notifier or Notifier()

    def get(self) -> SiteSettings:
        rows = self.client.select(self.TABLE, limit=1)
        if not rows:
            logger.info("No site settings stored yet; using defaults")
            return SiteSettings()
        return SiteSettings.from_row(rows[0])

    def update(self, form: ThemeSettingsForm) -> SiteSettings:
        """Insert the settings row when it does not exist yet, otherwise update it."""

        try:
            current = self.get()
            values = form.model_dump()
            if current.id is None:
                rows = self.client.insert(self.TABLE, values)
            else:
                values["updated_at"] = datetime.now(timezone.utc).isoformat()
                rows = self.client.update(self.TABLE, values, filters=[("id", "eq", current.id)])
        except BackendError:
            self.notifier.error("Failed to update theme settings")
            raise

        self.notifier.success("Default theme updated successfully")
        if rows:
            return SiteSettings.from_row(rows[0])
        return SiteSettings(id=current.id, **form.model_dump())


__all__ = ["SiteSettingsService", "ThemeSettingsForm"]
