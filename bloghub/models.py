"""Records exchanged with the hosted backend and kept on the reader's device."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

PLACEHOLDER_IMAGE = "/placeholder.svg"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse the ISO-8601 timestamps the backend emits (``Z`` suffix allowed)."""

    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass(slots=True)
class Article:
    """An article as stored in the ``articles`` table."""

    id: str
    title: str
    slug: str
    excerpt: str
    content: str
    author_name: str
    category: str
    date: str
    read_time: str
    tags: list[str] = field(default_factory=list)
    author_avatar: str = PLACEHOLDER_IMAGE
    cover_image: str = PLACEHOLDER_IMAGE
    published: bool = False
    view_count: int = 0
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Article":
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            slug=row.get("slug") or "",
            excerpt=row.get("excerpt") or "",
            content=row.get("content") or "",
            author_name=row.get("author_name") or "",
            category=row.get("category") or "",
            date=row.get("date") or row.get("created_at") or "",
            read_time=row.get("read_time") or "",
            tags=list(row.get("tags") or []),
            author_avatar=row.get("author_avatar") or PLACEHOLDER_IMAGE,
            cover_image=row.get("cover_image") or PLACEHOLDER_IMAGE,
            published=bool(row.get("published", False)),
            view_count=int(row.get("view_count") or 0),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    @property
    def published_at(self) -> datetime | None:
        return parse_timestamp(self.date)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class CommentReply:
    id: str
    comment_id: str
    name: str
    content: str
    created_at: str
    email: str | None = None
    is_admin: bool = False
    admin_username: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "CommentReply":
        return cls(
            id=str(row["id"]),
            comment_id=str(row["comment_id"]),
            name=row.get("name") or "",
            content=row.get("content") or "",
            created_at=row.get("created_at") or "",
            email=row.get("email"),
            is_admin=bool(row.get("is_admin") or False),
            admin_username=row.get("admin_username"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class Comment:
    """A top-level reader comment with its replies and, for moderation, the article title."""

    id: str
    article_id: str
    name: str
    email: str
    content: str
    created_at: str
    replies: list[CommentReply] = field(default_factory=list)
    article_title: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Comment":
        return cls(
            id=str(row["id"]),
            article_id=str(row["article_id"]),
            name=row.get("name") or "",
            email=row.get("email") or "",
            content=row.get("content") or "",
            created_at=row.get("created_at") or "",
        )

    @property
    def initial(self) -> str:
        return self.name[:1].upper()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class Admin:
    id: str
    username: str
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Admin":
        # The password column is deliberately not carried around.
        return cls(id=str(row["id"]), username=row["username"], created_at=row.get("created_at"))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class SiteSettings:
    default_theme: str = "system"
    default_theme_color: str = "purple"
    id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "SiteSettings":
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            default_theme=row.get("default_theme") or "system",
            default_theme_color=row.get("default_theme_color") or "purple",
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class BookmarkEntry:
    """Snapshot of an article taken when the reader saved it."""

    id: str
    title: str
    slug: str
    excerpt: str
    cover_image: str
    category: str
    read_time: str
    view_count: int
    date: str

    @classmethod
    def from_article(cls, article: Article) -> "BookmarkEntry":
        return cls(
            id=article.id,
            title=article.title,
            slug=article.slug,
            excerpt=article.excerpt,
            cover_image=article.cover_image,
            category=article.category,
            read_time=article.read_time,
            view_count=article.view_count,
            date=article.date,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BookmarkEntry":
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            slug=str(data["slug"]),
            excerpt=str(data.get("excerpt") or ""),
            cover_image=str(data.get("cover_image") or data.get("coverImage") or PLACEHOLDER_IMAGE),
            category=str(data.get("category") or ""),
            read_time=str(data.get("read_time") or data.get("readTime") or ""),
            view_count=int(data.get("view_count") or data.get("viewCount") or 0),
            date=str(data.get("date") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


__all__ = [
    "PLACEHOLDER_IMAGE",
    "Article",
    "Comment",
    "CommentReply",
    "Admin",
    "SiteSettings",
    "BookmarkEntry",
    "parse_timestamp",
]
