"""Admin dashboard and analytics aggregation."""

from .service import (
    AnalyticsReport,
    AnalyticsService,
    ArticleStats,
    DashboardSummary,
    articles_frame,
    category_distribution,
    views_and_likes_chart,
    within_range,
)

__all__ = [
    "AnalyticsService",
    "AnalyticsReport",
    "ArticleStats",
    "DashboardSummary",
    "articles_frame",
    "category_distribution",
    "views_and_likes_chart",
    "within_range",
]
