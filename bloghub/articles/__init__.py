"""Article reading, editing and rendering."""

from .content import Heading, RenderedContent, parse_tags, render_content, slugify
from .forms import ArticleForm
from .service import (
    ArticleService,
    categories_of,
    filter_and_sort,
    related_articles,
    search_articles,
    status_counts,
)

__all__ = [
    "ArticleService",
    "ArticleForm",
    "Heading",
    "RenderedContent",
    "categories_of",
    "filter_and_sort",
    "parse_tags",
    "related_articles",
    "render_content",
    "search_articles",
    "slugify",
    "status_counts",
]
