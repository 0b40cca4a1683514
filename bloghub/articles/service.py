"""Article retrieval for the reader and CRUD for the admin console."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from loguru import logger

from bloghub.articles.forms import ArticleForm
from bloghub.backend.client import BackendClient
from bloghub.errors import BackendError, NotFoundError
from bloghub.models import Article
from bloghub.notifications import Notifier

StatusFilter = Literal["all", "published", "draft"]
SortKey = Literal["newest", "oldest", "views", "title"]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _sort_date(article: Article) -> datetime:
    moment = article.published_at
    if moment is None:
        return _EPOCH
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def search_articles(
    articles: list[Article], term: str = "", category: str | None = None
) -> list[Article]:
    """Reader-side search over title and excerpt, optionally within one category."""

    needle = term.strip().lower()
    return [
        article
        for article in articles
        if (not category or article.category == category)
        and (not needle or needle in article.title.lower() or needle in article.excerpt.lower())
    ]


def categories_of(articles: list[Article]) -> list[str]:
    """Distinct categories in first-seen order."""

    seen: dict[str, None] = {}
    for article in articles:
        seen.setdefault(article.category, None)
    return list(seen)


def filter_and_sort(
    articles: list[Article],
    status: StatusFilter = "all",
    term: str = "",
    sort: SortKey = "newest",
) -> list[Article]:
    """Admin list view: filter by publication status and title, then sort."""

    needle = term.strip().lower()
    selected = [
        article
        for article in articles
        if not (status == "published" and not article.published)
        and not (status == "draft" and article.published)
        and (not needle or needle in article.title.lower())
    ]

    if sort == "newest":
        selected.sort(key=_sort_date, reverse=True)
    elif sort == "oldest":
        selected.sort(key=_sort_date)
    elif sort == "views":
        selected.sort(key=lambda article: article.view_count, reverse=True)
    elif sort == "title":
        selected.sort(key=lambda article: article.title.casefold())
    return selected


def status_counts(articles: list[Article]) -> dict[str, int]:
    published = sum(1 for article in articles if article.published)
    return {"total": len(articles), "published": published, "draft": len(articles) - published}


def related_articles(article: Article, candidates: list[Article], count: int = 2) -> list[Article]:
    """Articles sharing the category or at least one tag, excluding ``article``."""

    tags = set(article.tags)
    return [
        other
        for other in candidates
        if other.slug != article.slug and (other.category == article.category or tags.intersection(other.tags))
    ][:count]


class ArticleService:
    """Pass-through to the ``articles`` table plus client-side list shaping."""

    TABLE = "articles"

    def __init__(self, client: BackendClient, notifier: Notifier | None = None) -> None:
        self.client = client
        self.notifier = notifier or Notifier()

    # -- reader -----------------------------------------------------------------

    def list_published(self, limit: int | None = None) -> list[Article]:
        rows = self.client.select(
            self.TABLE,
            filters=[("published", "eq", True)],
            order="date",
            ascending=False,
            limit=limit,
        )
        articles = [Article.from_row(row) for row in rows]
        logger.debug("Loaded {} published articles", len(articles))
        return articles

    def recent(self, count: int = 3) -> list[Article]:
        return self.list_published(limit=count)

    def get_by_slug(self, slug: str, *, count_view: bool = True) -> Article:
        """Fetch a published article; optionally record one more view."""

        row = self.client.select(
            self.TABLE,
            filters=[("slug", "eq", slug), ("published", "eq", True)],
            single=True,
        )
        article = Article.from_row(row)
        if count_view:
            try:
                self.client.rpc("increment_view_count", {"article_id": article.id})
            except BackendError as exc:
                logger.warning("Could not record a view for '{}': {}", slug, exc)
            else:
                article.view_count += 1
        return article

    def related(self, article: Article, count: int = 2) -> list[Article]:
        return related_articles(article, self.list_published(), count)

    def categories(self) -> list[str]:
        return categories_of(self.list_published())

    # -- admin ------------------------------------------------------------------

    def list_all(self) -> list[Article]:
        rows = self.client.select(self.TABLE, order="created_at", ascending=False)
        return [Article.from_row(row) for row in rows]

    def get(self, article_id: str) -> Article:
        row = self.client.select(self.TABLE, filters=[("id", "eq", article_id)], single=True)
        return Article.from_row(row)

    def create(self, form: ArticleForm) -> Article:
        try:
            rows = self.client.insert(self.TABLE, form.to_row())
        except BackendError:
            self.notifier.error("Failed to save article")
            raise
        self.notifier.success("Article created successfully")
        if rows:
            return Article.from_row(rows[0])
        return self.get_by_field("slug", form.slug)

    def update(self, article_id: str, form: ArticleForm) -> Article:
        try:
            rows = self.client.update(self.TABLE, form.to_row(), filters=[("id", "eq", article_id)])
        except BackendError:
            self.notifier.error("Failed to save article")
            raise
        if not rows:
            self.notifier.error("Failed to save article")
            raise NotFoundError(f"Article '{article_id}' does not exist", status_code=404)
        self.notifier.success("Article updated successfully")
        return Article.from_row(rows[0])

    def delete(self, article_id: str) -> None:
        try:
            self.client.delete(self.TABLE, filters=[("id", "eq", article_id)])
        except BackendError:
            self.notifier.error("Failed to delete article")
            raise
        self.notifier.success("Article deleted successfully")

    def get_by_field(self, column: str, value: str) -> Article:
        row = self.client.select(self.TABLE, filters=[(column, "eq", value)], single=True)
        return Article.from_row(row)


__all__ = [
    "ArticleService",
    "StatusFilter",
    "SortKey",
    "search_articles",
    "categories_of",
    "filter_and_sort",
    "status_counts",
    "related_articles",
]
