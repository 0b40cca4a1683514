"""Hosted backend connection settings."""

from __future__ import annotations

from pydantic import Field, field_validator

from bloghub.config.base import BaseConfig
from bloghub.config.utils import resolve_env_reference


class BackendConfig(BaseConfig):
    """Where the backend-as-a-service lives and how to authenticate to it."""

    url: str = Field(..., description="Project URL, e.g. https://xyz.supabase.co", min_length=1)
    anon_key: str = Field(
        ...,
        description="Published anonymous API key, can use 'env:VAR_NAME' format",
        min_length=1,
    )
    timeout: float = Field(10.0, gt=0, description="Per-request timeout in seconds")
    setup_function: str = Field(
        "create_tables_and_functions",
        description="Edge function that provisions tables, RPC functions and seed data",
        min_length=1,
    )

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, url: str) -> str:
        return url.rstrip("/")

    @property
    def anon_key_secret(self) -> str:
        """Return the resolved anonymous key, expanding any ``env:VAR`` references."""

        resolved = resolve_env_reference(self.anon_key)
        assert resolved is not None  # guarded by resolve_env_reference
        return resolved


__all__ = ["BackendConfig"]
