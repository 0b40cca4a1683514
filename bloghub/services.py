"""Wiring of the backend client into the per-concern services."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from bloghub.analytics.service import AnalyticsService
from bloghub.articles.service import ArticleService
from bloghub.auth.service import AdminAuthService
from bloghub.backend.client import BackendClient
from bloghub.comments.service import CommentService
from bloghub.config.app import AppConfig
from bloghub.config.utils import expand_path
from bloghub.likes.service import LikeService
from bloghub.notifications import Notifier
from bloghub.settings.service import SiteSettingsService
from bloghub.storage.bookmarks import BookmarkStore
from bloghub.storage.local import LocalStore
from bloghub.storage.theme import ThemePreferences


@dataclass(slots=True)
class Services:
    """Every backend-facing service sharing one client and one notifier."""

    client: BackendClient
    notifier: Notifier
    articles: ArticleService
    comments: CommentService
    likes: LikeService
    auth: AdminAuthService
    settings: SiteSettingsService
    analytics: AnalyticsService

    @classmethod
    def from_client(cls, client: BackendClient, notifier: Notifier | None = None) -> "Services":
        notifier = notifier or Notifier()
        auth = AdminAuthService(client, notifier)
        likes = LikeService(client, notifier)
        return cls(
            client=client,
            notifier=notifier,
            articles=ArticleService(client, notifier),
            comments=CommentService(client, notifier, auth=auth),
            likes=likes,
            auth=auth,
            settings=SiteSettingsService(client, notifier),
            analytics=AnalyticsService(client, likes, notifier),
        )


def build_services(config: AppConfig, notifier: Notifier | None = None) -> Services:
    if config.backend is None:
        raise ValueError("Backend is not configured; add a [backend] block with url and anon_key")
    logger.debug("Connecting to backend at {}", config.backend.url)
    return Services.from_client(BackendClient(config.backend), notifier)


@dataclass(slots=True)
class LocalState:
    """The reader's device-local stores."""

    store: LocalStore
    bookmarks: BookmarkStore
    theme: ThemePreferences


def open_local_state(
    config: AppConfig,
    notifier: Notifier | None = None,
    *,
    default_theme: str = "system",
    default_color: str = "default",
) -> LocalState:
    storage = config.storage
    store = LocalStore(expand_path(storage.path))
    return LocalState(
        store=store,
        bookmarks=BookmarkStore(
            store,
            key=storage.bookmarks_key,
            limit=storage.bookmark_limit,
            notifier=notifier,
        ),
        theme=ThemePreferences(
            store,
            theme_key=storage.theme_key,
            color_key=storage.color_key,
            default_theme=default_theme,
            default_color=default_color,
        ),
    )


__all__ = ["Services", "LocalState", "build_services", "open_local_state"]
