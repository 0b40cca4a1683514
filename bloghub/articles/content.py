"""Slugs, tag parsing and article body rendering."""

from __future__ import annotations

import re
from dataclasses import dataclass

import markdown
from bs4 import BeautifulSoup

_HTML_BLOCK = re.compile(r"^\s*<(p|h[1-6]|div|ul|ol|blockquote|pre|img|figure)\b", re.IGNORECASE)
_HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


def slugify(text: str) -> str:
    """Convert a title into a URL-friendly slug."""

    text = text.lower().strip()
    text = re.sub(r"[\s_]+", "-", text)
    text = re.sub(r"[^\w\-]", "", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


def parse_tags(raw: str | list[str]) -> list[str]:
    """Split a comma-separated tag field, dropping blanks."""

    pieces = raw if isinstance(raw, list) else raw.split(",")
    return [tag.strip() for tag in pieces if tag and tag.strip()]


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    text: str
    anchor: str


@dataclass(frozen=True, slots=True)
class RenderedContent:
    html: str
    headings: list[Heading]


def _unique_anchor(base: str, taken: set[str]) -> str:
    anchor, suffix = base, 1
    while anchor in taken:
        anchor = f"{base}-{suffix}"
        suffix += 1
    return anchor


def render_content(body: str) -> RenderedContent:
    """Render an article body to HTML and collect its headings.

    Bodies written in the rich-text editor are already HTML and pass through;
    everything else is treated as Markdown. Headings without an ``id`` get one
    derived from their text so every table-of-contents link has a target.
    Headings whose text yields no anchor are left out of the table.
    """

    if _HTML_BLOCK.match(body):
        html = body
    else:
        html = markdown.markdown(body, extensions=["fenced_code", "tables", "toc"])

    soup = BeautifulSoup(html, "lxml")
    elements = soup.find_all(_HEADING_TAGS)
    taken = {element["id"] for element in elements if element.get("id")}
    headings: list[Heading] = []
    changed = False
    for element in elements:
        text = element.get_text(" ", strip=True)
        anchor = element.get("id")
        if not anchor:
            base = slugify(text)
            if not base:
                continue
            anchor = _unique_anchor(base, taken)
            taken.add(anchor)
            element["id"] = anchor
            changed = True
        headings.append(Heading(int(element.name[1]), text, anchor))

    if changed and soup.body is not None:
        html = soup.body.decode_contents()
    return RenderedContent(html=html, headings=headings)


__all__ = ["slugify", "parse_tags", "render_content", "RenderedContent", "Heading"]
