from __future__ import annotations

import random
from pathlib import Path

import pytest

from bloghub.models import Article, BookmarkEntry
from bloghub.notifications import Notifier
from bloghub.storage import DEFAULT_LIMIT, BookmarkStore, LocalStore
from tests.fakes import article_row


def _article(index: int, **overrides) -> Article:
    return Article.from_row(article_row(index, **overrides))


@pytest.fixture()
def local(tmp_path: Path) -> LocalStore:
    return LocalStore(tmp_path / "storage.json")


@pytest.fixture()
def bookmarks(local: LocalStore, notifier: Notifier) -> BookmarkStore:
    return BookmarkStore(local, notifier=notifier)


def test_add_stores_snapshot_and_notifies(bookmarks: BookmarkStore, local: LocalStore, notifier: Notifier) -> None:
    assert bookmarks.add(_article(1)) is True

    assert bookmarks.is_bookmarked("a1")
    stored = local.get("bookmarks")
    assert stored[0]["slug"] == "article-number-1"
    assert stored[0]["view_count"] == 10
    assert notifier.drain()[0].level == "success"


def test_add_duplicate_is_noop(bookmarks: BookmarkStore, notifier: Notifier) -> None:
    bookmarks.add(_article(1))
    notifier.drain()

    assert bookmarks.add(_article(1)) is False

    assert len(bookmarks) == 1
    assert notifier.drain()[0].level == "info"


def test_add_beyond_limit_is_rejected(bookmarks: BookmarkStore, notifier: Notifier) -> None:
    for index in range(1, DEFAULT_LIMIT + 1):
        assert bookmarks.add(_article(index))
    notifier.drain()

    assert bookmarks.is_full
    assert bookmarks.add(_article(99)) is False

    assert len(bookmarks) == DEFAULT_LIMIT
    assert not bookmarks.is_bookmarked("a99")
    warning = notifier.drain()[0]
    assert warning.level == "warning"
    assert "full" in warning.message


def test_remove_and_missing_remove(bookmarks: BookmarkStore, local: LocalStore) -> None:
    bookmarks.add(_article(1))
    bookmarks.add(_article(2))

    assert bookmarks.remove("a1") is True
    assert bookmarks.remove("a1") is False

    assert [entry.id for entry in bookmarks] == ["a2"]
    assert [item["id"] for item in local.get("bookmarks")] == ["a2"]


def test_toggle_twice_restores_membership(bookmarks: BookmarkStore) -> None:
    article = _article(3)

    assert bookmarks.toggle(article) is True
    assert bookmarks.toggle(article) is False
    assert not bookmarks.is_bookmarked(article.id)

    bookmarks.add(_article(1))
    assert bookmarks.toggle(_article(1)) is False
    assert bookmarks.toggle(_article(1)) is True


def test_toggle_when_full_leaves_membership_unchanged(local: LocalStore) -> None:
    store = BookmarkStore(local, limit=2)
    store.add(_article(1))
    store.add(_article(2))

    assert store.toggle(_article(3)) is False
    assert store.toggle(_article(3)) is False
    assert [entry.id for entry in store] == ["a1", "a2"]


def test_clear_removes_everything(bookmarks: BookmarkStore, local: LocalStore) -> None:
    saved = [_article(index) for index in (1, 2, 3)]
    for article in saved:
        bookmarks.add(article)

    bookmarks.clear()

    assert len(bookmarks) == 0
    assert all(not bookmarks.is_bookmarked(article.id) for article in saved)
    assert "bookmarks" not in local


def test_reload_round_trips_entries(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    first = BookmarkStore(LocalStore(path))
    for index in (3, 1, 2):
        first.add(_article(index))

    reloaded = BookmarkStore(LocalStore(path))

    assert reloaded.entries() == first.entries()
    assert [entry.id for entry in reloaded] == ["a3", "a1", "a2"]


def test_size_never_exceeds_limit_under_random_operations(local: LocalStore) -> None:
    rng = random.Random(7)
    store = BookmarkStore(local)
    for _ in range(300):
        index = rng.randint(1, 25)
        operation = rng.choice(["add", "remove", "toggle"])
        if operation == "add":
            store.add(_article(index))
        elif operation == "remove":
            store.remove(f"a{index}")
        else:
            store.toggle(_article(index))
        assert len(store) <= DEFAULT_LIMIT
        ids = [entry.id for entry in store]
        assert len(ids) == len(set(ids))


def test_load_skips_malformed_and_duplicate_entries(local: LocalStore) -> None:
    good = BookmarkEntry.from_article(_article(1)).to_dict()
    camel = {
        "id": "a2",
        "title": "Saved from the browser",
        "slug": "saved-from-the-browser",
        "coverImage": "/c.png",
        "readTime": "3 min read",
        "viewCount": 4,
    }
    local.set("bookmarks", [good, {"title": "no id"}, good, camel, "junk"])

    store = BookmarkStore(local)

    assert [entry.id for entry in store] == ["a1", "a2"]
    assert store.get("a2").read_time == "3 min read"
    assert store.get("a2").view_count == 4


def test_load_truncates_oversized_list(local: LocalStore) -> None:
    local.set("bookmarks", [BookmarkEntry.from_article(_article(i)).to_dict() for i in range(1, 6)])

    store = BookmarkStore(local, limit=3)

    assert [entry.id for entry in store] == ["a1", "a2", "a3"]


def test_non_list_record_is_ignored(local: LocalStore) -> None:
    local.set("bookmarks", {"a1": True})

    assert len(BookmarkStore(local)) == 0


def test_filter_and_categories(bookmarks: BookmarkStore) -> None:
    bookmarks.add(_article(1))
    bookmarks.add(_article(2, category="CSS", title="Grid layouts explained"))

    assert bookmarks.categories() == ["React", "CSS"]
    assert [entry.id for entry in bookmarks.filter(category="CSS")] == ["a2"]
    assert [entry.id for entry in bookmarks.filter(search="grid")] == ["a2"]
    assert bookmarks.find_by_slug("article-number-1").id == "a1"


def test_limit_must_be_positive(local: LocalStore) -> None:
    with pytest.raises(ValueError):
        BookmarkStore(local, limit=0)
