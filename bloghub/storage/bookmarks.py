"""The reader's reading list: saved article snapshots kept on this device."""

from __future__ import annotations

from typing import Iterator

from loguru import logger

from bloghub.models import Article, BookmarkEntry
from bloghub.notifications import Notifier
from bloghub.storage.local import LocalStore

DEFAULT_LIMIT = 10


class BookmarkStore:
    """Ordered, capped collection of bookmarked articles.

    Entries are unique by article id and kept in insertion order. Adding past
    ``limit`` is rejected. Every successful mutation rewrites the full list
    under ``key`` in the local store.
    """

    def __init__(
        self,
        store: LocalStore,
        *,
        key: str = "bookmarks",
        limit: int = DEFAULT_LIMIT,
        notifier: Notifier | None = None,
    ) -> None:
        if limit < 1:
            raise ValueError("Bookmark limit must be at least 1")
        self.store = store
        self.key = key
        self.limit = limit
        self.notifier = notifier or Notifier()
        self._entries: list[BookmarkEntry] = self._load()

    def add(self, article: Article | BookmarkEntry) -> bool:
        """Save ``article``; returns ``True`` only when a new entry was stored."""

        entry = article if isinstance(article, BookmarkEntry) else BookmarkEntry.from_article(article)
        if self.is_bookmarked(entry.id):
            self.notifier.info(f'"{entry.title}" is already in your reading list')
            return False
        if len(self._entries) >= self.limit:
            self.notifier.warning(
                f"Reading list is full ({self.limit} articles). Remove one to save another."
            )
            return False

        self._entries.append(entry)
        self._persist()
        self.notifier.success(f'Saved "{entry.title}" to your reading list')
        return True

    def remove(self, article_id: str) -> bool:
        """Drop the entry for ``article_id``; returns whether one was removed."""

        for index, entry in enumerate(self._entries):
            if entry.id == article_id:
                del self._entries[index]
                self._persist()
                self.notifier.success(f'Removed "{entry.title}" from your reading list')
                return True
        return False

    def toggle(self, article: Article | BookmarkEntry) -> bool:
        """Flip membership of ``article``; returns the new state."""

        if self.is_bookmarked(article.id):
            self.remove(article.id)
            return False
        return self.add(article)

    def is_bookmarked(self, article_id: str) -> bool:
        return any(entry.id == article_id for entry in self._entries)

    def clear(self) -> None:
        self._entries = []
        self.store.remove(self.key)
        self.notifier.success("Reading list cleared")

    def get(self, article_id: str) -> BookmarkEntry | None:
        return next((entry for entry in self._entries if entry.id == article_id), None)

    def find_by_slug(self, slug: str) -> BookmarkEntry | None:
        return next((entry for entry in self._entries if entry.slug == slug), None)

    def entries(self) -> list[BookmarkEntry]:
        return list(self._entries)

    def categories(self) -> list[str]:
        seen: dict[str, None] = {}
        for entry in self._entries:
            seen.setdefault(entry.category, None)
        return list(seen)

    def filter(self, search: str = "", category: str | None = None) -> list[BookmarkEntry]:
        term = search.strip().lower()
        return [
            entry
            for entry in self._entries
            if (not category or entry.category == category)
            and (not term or term in entry.title.lower() or term in entry.excerpt.lower())
        ]

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.limit

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[BookmarkEntry]:
        return iter(list(self._entries))

    def _persist(self) -> None:
        self.store.set(self.key, [entry.to_dict() for entry in self._entries])

    def _load(self) -> list[BookmarkEntry]:
        raw = self.store.get(self.key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.error("Stored bookmarks under '{}' are not a list; ignoring them", self.key)
            return []

        entries: list[BookmarkEntry] = []
        seen: set[str] = set()
        for item in raw:
            try:
                entry = BookmarkEntry.from_dict(item)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping malformed bookmark {!r}: {}", item, exc)
                continue
            if entry.id in seen:
                continue
            seen.add(entry.id)
            entries.append(entry)

        if len(entries) > self.limit:
            logger.warning(
                "Stored reading list has {} entries; keeping the first {}", len(entries), self.limit
            )
            entries = entries[: self.limit]
        logger.debug("Loaded {} bookmarks", len(entries))
        return entries


__all__ = ["BookmarkStore", "DEFAULT_LIMIT"]
