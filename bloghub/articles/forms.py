"""Validated input for creating and editing articles."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bloghub.articles.content import parse_tags, slugify
from bloghub.models import PLACEHOLDER_IMAGE


def require_length(value: str, minimum: int, message: str) -> str:
    """Strip ``value`` and reject it when shorter than ``minimum``."""

    stripped = value.strip()
    if len(stripped) < minimum:
        raise ValueError(message)
    return stripped


class ArticleForm(BaseModel):
    """The article editor form."""

    model_config = ConfigDict(extra="forbid")

    title: str
    slug: str = ""
    excerpt: str
    content: str
    category: str
    tags: str | list[str]
    read_time: str = "5 min read"
    cover_image: str | None = None
    author_name: str = "Admin"
    author_avatar: str | None = None
    published: bool = False

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return require_length(value, 5, "Title must be at least 5 characters")

    @field_validator("excerpt")
    @classmethod
    def _excerpt(cls, value: str) -> str:
        return require_length(value, 10, "Excerpt must be at least 10 characters")

    @field_validator("content")
    @classmethod
    def _content(cls, value: str) -> str:
        return require_length(value, 50, "Content must be at least 50 characters")

    @field_validator("category")
    @classmethod
    def _category(cls, value: str) -> str:
        return require_length(value, 2, "Category is required")

    @field_validator("read_time")
    @classmethod
    def _read_time(cls, value: str) -> str:
        return require_length(value, 1, "Read time is required")

    @field_validator("author_name")
    @classmethod
    def _author(cls, value: str) -> str:
        return require_length(value, 2, "Author name is required")

    @field_validator("tags")
    @classmethod
    def _tags(cls, value: str | list[str]) -> list[str]:
        joined = value if isinstance(value, str) else ",".join(value)
        require_length(joined, 2, "At least one tag is required")
        tags = parse_tags(value)
        if not tags:
            raise ValueError("At least one tag is required")
        return tags

    @model_validator(mode="after")
    def _derive_slug(self) -> "ArticleForm":
        slug = self.slug.strip() or slugify(self.title)
        if len(slug) < 5:
            raise ValueError("Slug must be at least 5 characters")
        self.slug = slug
        return self

    def to_row(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "slug": self.slug,
            "excerpt": self.excerpt,
            "content": self.content,
            "category": self.category,
            "tags": list(self.tags),
            "read_time": self.read_time,
            "cover_image": self.cover_image or PLACEHOLDER_IMAGE,
            "author_name": self.author_name,
            "author_avatar": self.author_avatar or PLACEHOLDER_IMAGE,
            "published": self.published,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }


__all__ = ["ArticleForm", "require_length"]
