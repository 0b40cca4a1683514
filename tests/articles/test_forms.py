from __future__ import annotations

import pytest
from pydantic import ValidationError

from bloghub.articles import ArticleForm
from bloghub.models import PLACEHOLDER_IMAGE


def _form(**overrides) -> dict:
    data = {
        "title": "Understanding CSS Grid",
        "excerpt": "A tour of two-dimensional layouts.",
        "content": "Grid lets you place items in rows and columns without floats or hacks." * 2,
        "category": "CSS",
        "tags": "css, grid, layout",
    }
    data.update(overrides)
    return data


def _messages(exc: ValidationError) -> list[str]:
    return [err["msg"] for err in exc.errors()]


def test_valid_form_derives_slug_and_defaults() -> None:
    form = ArticleForm(**_form())

    assert form.slug == "understanding-css-grid"
    assert form.tags == ["css", "grid", "layout"]
    assert form.read_time == "5 min read"
    assert form.author_name == "Admin"
    assert form.published is False


def test_explicit_slug_is_kept() -> None:
    assert ArticleForm(**_form(slug="css-grid-guide")).slug == "css-grid-guide"


@pytest.mark.parametrize(
    ("field", "value", "message"),
    [
        ("title", "Hi", "Title must be at least 5 characters"),
        ("excerpt", "short", "Excerpt must be at least 10 characters"),
        ("content", "too short", "Content must be at least 50 characters"),
        ("category", "", "Category is required"),
        ("tags", " , ", "At least one tag is required"),
    ],
)
def test_field_rules(field: str, value: str, message: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        ArticleForm(**_form(**{field: value}))

    assert any(message in text for text in _messages(excinfo.value))


def test_short_slug_is_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        ArticleForm(**_form(slug="abc"))

    assert any("Slug must be at least 5 characters" in text for text in _messages(excinfo.value))


def test_unknown_field_is_rejected() -> None:
    with pytest.raises(ValidationError):
        ArticleForm(**_form(view_count=5))


def test_to_row_fills_placeholders() -> None:
    row = ArticleForm(**_form(tags=["css"], published=True)).to_row()

    assert row["cover_image"] == PLACEHOLDER_IMAGE
    assert row["author_avatar"] == PLACEHOLDER_IMAGE
    assert row["tags"] == ["css"]
    assert row["published"] is True
    assert row["updated_at"].endswith("+00:00")
    assert "view_count" not in row
