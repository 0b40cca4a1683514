"""Dashboard and analytics figures computed from the article list."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

import polars as pl
from loguru import logger

from bloghub.backend.client import BackendClient
from bloghub.errors import BackendError
from bloghub.likes.service import LikeService
from bloghub.models import Article
from bloghub.notifications import Notifier

TimeRange = Literal["all", "7days", "30days"]

_WINDOWS: dict[str, timedelta | None] = {
    "all": None,
    "7days": timedelta(days=7),
    "30days": timedelta(days=30),
}

_SCHEMA = {
    "id": pl.String,
    "title": pl.String,
    "slug": pl.String,
    "category": pl.String,
    "published": pl.Boolean,
    "view_count": pl.Int64,
    "date": pl.String,
    "moment": pl.Datetime("us"),
}

CHART_TITLE_LIMIT = 20
CHART_SIZE = 5
DASHBOARD_SIZE = 5


@dataclass(slots=True)
class ArticleStats:
    id: str
    title: str
    slug: str
    category: str
    published: bool
    view_count: int
    likes: int
    date: str


@dataclass(slots=True)
class AnalyticsReport:
    time_range: str
    articles: list[ArticleStats] = field(default_factory=list)
    total_views: int = 0
    total_likes: int = 0
    published_count: int = 0
    draft_count: int = 0
    most_viewed: ArticleStats | None = None
    most_liked: ArticleStats | None = None
    most_recent: ArticleStats | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class DashboardSummary:
    total_articles: int
    published_articles: int
    total_views: int
    recent: list[Article]
    popular: list[Article]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _naive_utc(article: Article) -> datetime | None:
    moment = article.published_at
    if moment is None:
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def articles_frame(articles: list[Article]) -> pl.DataFrame:
    """Tabulate the columns the analytics views need."""

    return pl.DataFrame(
        [
            {
                "id": article.id,
                "title": article.title,
                "slug": article.slug,
                "category": article.category,
                "published": article.published,
                "view_count": article.view_count,
                "date": article.date,
                "moment": _naive_utc(article),
            }
            for article in articles
        ],
        schema=_SCHEMA,
    )


def within_range(frame: pl.DataFrame, time_range: str, now: datetime) -> pl.DataFrame:
    if time_range not in _WINDOWS:
        raise ValueError(f"Unknown time range '{time_range}'; choose one of {', '.join(_WINDOWS)}")
    window = _WINDOWS[time_range]
    if window is None:
        return frame
    cutoff = now.astimezone(timezone.utc).replace(tzinfo=None) - window
    return frame.filter(pl.col("moment").is_not_null() & (pl.col("moment") >= cutoff))


def _top(frame: pl.DataFrame, column: str) -> ArticleStats | None:
    if frame.is_empty():
        return None
    row = frame.sort(column, descending=True, nulls_last=True, maintain_order=True).row(0, named=True)
    return _stats(row)


def _stats(row: dict[str, Any]) -> ArticleStats:
    return ArticleStats(
        id=row["id"],
        title=row["title"],
        slug=row["slug"],
        category=row["category"],
        published=row["published"],
        view_count=row["view_count"],
        likes=row["likes"],
        date=row["date"],
    )


def views_and_likes_chart(report: AnalyticsReport) -> list[dict[str, Any]]:
    """Bar-chart rows for the first five published articles of the report."""

    rows = []
    for article in [a for a in report.articles if a.published][:CHART_SIZE]:
        name = article.title
        if len(name) > CHART_TITLE_LIMIT:
            name = name[:CHART_TITLE_LIMIT] + "..."
        rows.append({"name": name, "views": article.view_count, "likes": article.likes})
    return rows


def category_distribution(report: AnalyticsReport) -> list[dict[str, Any]]:
    """Pie-chart rows: how many articles each category holds."""

    if not report.articles:
        return []
    frame = pl.DataFrame({"category": [article.category for article in report.articles]})
    counts = frame.group_by("category", maintain_order=True).agg(pl.len().alias("value"))
    return [{"name": row["category"], "value": row["value"]} for row in counts.iter_rows(named=True)]


class AnalyticsService:
    """Aggregates article, view and like figures for the admin console."""

    def __init__(
        self,
        client: BackendClient,
        likes: LikeService | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.client = client
        self.notifier = notifier or Notifier()
        self.likes = likes or LikeService(client, self.notifier)

    def dashboard(self) -> DashboardSummary:
        try:
            rows, total = self.client.select("articles", order="created_at", ascending=False, count=True)
            _, published = self.client.select(
                "articles", "id", filters=[("published", "eq", True)], count=True
            )
        except BackendError:
            self.notifier.error("Failed to load dashboard data")
            raise

        articles = [Article.from_row(row) for row in rows]
        total_views = int(articles_frame(articles)["view_count"].sum() or 0)
        recent = articles[:DASHBOARD_SIZE]
        popular = sorted(recent, key=lambda article: article.view_count, reverse=True)
        return DashboardSummary(
            total_articles=total,
            published_articles=published,
            total_views=total_views,
            recent=recent,
            popular=popular,
        )

    def report(self, time_range: str = "all", *, now: datetime | None = None) -> AnalyticsReport:
        now = now or datetime.now(timezone.utc)
        try:
            rows = self.client.select("articles", order="date", ascending=False)
        except BackendError:
            self.notifier.error("Failed to load analytics data")
            raise

        frame = within_range(articles_frame([Article.from_row(row) for row in rows]), time_range, now)
        if frame.is_empty():
            return AnalyticsReport(time_range=time_range)

        frame = frame.with_columns(
            pl.Series("likes", [self._likes_for(article_id) for article_id in frame["id"]], dtype=pl.Int64)
        )
        published = int(frame["published"].sum())
        stats = [_stats(row) for row in frame.iter_rows(named=True)]

        report = AnalyticsReport(
            time_range=time_range,
            articles=stats,
            total_views=int(frame["view_count"].sum()),
            total_likes=int(frame["likes"].sum()),
            published_count=published,
            draft_count=frame.height - published,
            most_viewed=_top(frame, "view_count"),
            most_liked=_top(frame, "likes"),
            most_recent=_top(frame, "moment"),
        )
        logger.info(
            "Analytics for {}: {} articles, {} views, {} likes",
            time_range,
            frame.height,
            report.total_views,
            report.total_likes,
        )
        return report

    def _likes_for(self, article_id: str) -> int:
        try:
            return self.likes.count(article_id)
        except BackendError as exc:
            logger.error("Error fetching likes count for {}: {}", article_id, exc)
            return 0


__all__ = [
    "AnalyticsService",
    "AnalyticsReport",
    "ArticleStats",
    "DashboardSummary",
    "TimeRange",
    "articles_frame",
    "within_range",
    "views_and_likes_chart",
    "category_distribution",
]
