"""Web site and admin console configuration models."""

from __future__ import annotations

from pydantic import Field

from bloghub.config.base import BaseConfig


class WebUIConfig(BaseConfig):
    """Top-level settings for the FastAPI site and its admin API."""

    enabled: bool = Field(True, description="Whether to serve the HTML reader pages.")
    title: str = Field(
        "BlogHub",
        description="Site title displayed in page headers.",
        min_length=1,
    )
    tagline: str = Field(
        "Discover insightful articles on web development, design, and technology",
        description="Subtitle shown in the home page hero.",
    )
    session_header: str = Field(
        "X-Admin-Token",
        description="Header to read the admin session token from.",
        min_length=1,
    )
    session_ttl_minutes: int = Field(
        720, ge=1, description="Minutes before an admin session token expires.",
    )
    about: str = Field(
        "BlogHub is a place to share ideas about building for the web.",
        description="Body text of the About page.",
    )
    contact_email: str = Field(
        "hello@bloghub.dev", description="Address shown on the Contact page.",
    )


__all__ = ["WebUIConfig"]
