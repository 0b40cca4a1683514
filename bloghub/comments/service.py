"""Reader comments, replies and admin moderation."""

from __future__ import annotations

import re
from collections import defaultdict

from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator

from bloghub.auth.service import AdminAuthService
from bloghub.backend.client import BackendClient
from bloghub.errors import AuthenticationError, BackendError
from bloghub.models import Admin, Comment, CommentReply
from bloghub.notifications import Notifier

PREVIEW_SIZE = 3

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_email(value: str) -> str:
    value = value.strip()
    if not _EMAIL.match(value):
        raise ValueError("Please enter a valid email")
    return value


class CommentForm(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    email: str
    content: str

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        if len(value.strip()) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value.strip()

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("content")
    @classmethod
    def _content(cls, value: str) -> str:
        if len(value.strip()) < 3:
            raise ValueError("Comment must be at least 3 characters")
        return value.strip()


class ReplyForm(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    email: str | None = None
    content: str

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        if len(value.strip()) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value.strip()

    @field_validator("email")
    @classmethod
    def _email(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return _check_email(value)

    @field_validator("content")
    @classmethod
    def _content(cls, value: str) -> str:
        if len(value.strip()) < 3:
            raise ValueError("Reply must be at least 3 characters")
        return value.strip()


def _first(rows: list[dict], table: str) -> dict:
    if not rows:
        raise BackendError(f"Insert into '{table}' returned no row")
    return rows[0]


def preview(comments: list[Comment], show_all: bool = False) -> tuple[list[Comment], bool]:
    """Return the comments to display and whether more are hidden behind "show all"."""

    has_more = len(comments) > PREVIEW_SIZE
    return (comments if show_all else comments[:PREVIEW_SIZE]), has_more


def search_comments(comments: list[Comment], term: str) -> list[Comment]:
    """Moderation search across author, email, body and article title."""

    needle = term.strip().lower()
    if not needle:
        return list(comments)
    return [
        comment
        for comment in comments
        if needle in comment.name.lower()
        or needle in comment.email.lower()
        or needle in comment.content.lower()
        or needle in (comment.article_title or "").lower()
    ]


class CommentService:
    """Pass-through to the ``comments`` and ``comment_replies`` tables."""

    COMMENTS = "comments"
    REPLIES = "comment_replies"

    def __init__(
        self,
        client: BackendClient,
        notifier: Notifier | None = None,
        auth: AdminAuthService | None = None,
    ) -> None:
        self.client = client
        self.notifier = notifier or Notifier()
        self.auth = auth or AdminAuthService(client, self.notifier)

    def list_for_article(self, article_id: str) -> list[Comment]:
        rows = self.client.select(
            self.COMMENTS,
            filters=[("article_id", "eq", article_id)],
            order="created_at",
            ascending=False,
        )
        comments = [Comment.from_row(row) for row in rows]
        self._attach_replies(comments)
        return comments

    def post_comment(self, article_id: str, form: CommentForm) -> Comment:
        payload = {"article_id": article_id, **form.model_dump()}
        try:
            rows = self.client.insert(self.COMMENTS, payload)
            row = _first(rows, self.COMMENTS)
        except BackendError:
            self.notifier.error("Failed to post comment. Please try again.")
            raise
        self.notifier.success("Comment posted successfully!")
        logger.info("New comment on article {}", article_id)
        return Comment.from_row(row)

    def post_reply(self, comment_id: str, form: ReplyForm) -> CommentReply:
        payload = {"comment_id": comment_id, **form.model_dump(), "is_admin": False}
        try:
            rows = self.client.insert(self.REPLIES, payload)
            row = _first(rows, self.REPLIES)
        except BackendError:
            self.notifier.error("Failed to post reply. Please try again.")
            raise
        self.notifier.success("Reply posted successfully!")
        return CommentReply.from_row(row)

    # -- moderation -------------------------------------------------------------

    def list_all(self) -> list[Comment]:
        try:
            rows = self.client.select(self.COMMENTS, order="created_at", ascending=False)
            comments = [Comment.from_row(row) for row in rows]
            if comments:
                article_ids = list(dict.fromkeys(comment.article_id for comment in comments))
                titles = {
                    str(row["id"]): row.get("title") or ""
                    for row in self.client.select("articles", "id,title", filters=[("id", "in", article_ids)])
                }
                for comment in comments:
                    comment.article_title = titles.get(comment.article_id) or "Unknown Article"
                self._attach_replies(comments)
        except BackendError:
            self.notifier.error("Failed to load comments")
            raise
        return comments

    def admin_reply(self, admin: Admin, password: str, comment_id: str, content: str) -> CommentReply:
        """Post a reply as ``admin`` after re-checking their password."""

        if not content.strip():
            raise ValueError("Reply content is required")
        if not self.auth.verify_password(admin, password):
            self.notifier.error("Incorrect password")
            raise AuthenticationError("Incorrect password")

        payload = {
            "comment_id": comment_id,
            "name": admin.username,
            "content": content.strip(),
            "is_admin": True,
            "admin_username": admin.username,
        }
        try:
            rows = self.client.insert(self.REPLIES, payload)
            row = _first(rows, self.REPLIES)
        except BackendError:
            self.notifier.error("Failed to post reply")
            raise
        self.notifier.success("Reply posted successfully")
        return CommentReply.from_row(row)

    def delete(self, comment_id: str) -> None:
        try:
            self.client.delete(self.COMMENTS, filters=[("id", "eq", comment_id)])
        except BackendError:
            self.notifier.error("Failed to delete comment")
            raise
        self.notifier.success("Comment deleted")

    def _attach_replies(self, comments: list[Comment]) -> None:
        if not comments:
            return
        rows = self.client.select(
            self.REPLIES,
            filters=[("comment_id", "in", [comment.id for comment in comments])],
            order="created_at",
            ascending=True,
        )
        grouped: dict[str, list[CommentReply]] = defaultdict(list)
        for row in rows:
            reply = CommentReply.from_row(row)
            grouped[reply.comment_id].append(reply)
        for comment in comments:
            comment.replies = grouped.get(comment.id, [])


__all__ = [
    "CommentService",
    "CommentForm",
    "ReplyForm",
    "PREVIEW_SIZE",
    "preview",
    "search_comments",
]
