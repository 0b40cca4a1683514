"""Article likes, counted and toggled by backend stored functions."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from bloghub.backend.client import BackendClient
from bloghub.errors import BackendError
from bloghub.notifications import Notifier


def _as_count(value: object) -> int | None:
    # bool is an int subclass; a boolean RPC result is not a count.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


class LikeService:
    """Calls ``get_like_count``, ``toggle_like`` and ``remove_like``."""

    def __init__(self, client: BackendClient, notifier: Notifier | None = None) -> None:
        self.client = client
        self.notifier = notifier or Notifier()

    def count(self, article_id: str) -> int:
        result = self.client.rpc("get_like_count", {"p_article_id": article_id})
        return _as_count(result) or 0

    def like(self, article_id: str) -> int | None:
        try:
            result = self.client.rpc("toggle_like", {"p_article_id": article_id})
        except BackendError:
            self.notifier.error("Failed to update like status")
            raise
        self.notifier.success("Article liked!")
        return _as_count(result)

    def unlike(self, article_id: str) -> int | None:
        try:
            result = self.client.rpc("remove_like", {"p_article_id": article_id})
        except BackendError:
            self.notifier.error("Failed to update like status")
            raise
        self.notifier.success("Like removed")
        return _as_count(result)


@dataclass(slots=True)
class LikeState:
    """A single viewer's like button: whether they liked it and the shown count."""

    service: LikeService
    article_id: str
    liked: bool = False
    count: int = 0

    def refresh(self) -> int:
        try:
            self.count = self.service.count(self.article_id)
        except BackendError as exc:
            logger.error("Error fetching like count: {}", exc)
        return self.count

    def toggle(self) -> bool:
        """Like or unlike; the state only changes when the backend call succeeds."""

        if self.liked:
            new_count = self.service.unlike(self.article_id)
        else:
            new_count = self.service.like(self.article_id)
        if new_count is not None:
            self.count = new_count
        self.liked = not self.liked
        return self.liked


__all__ = ["LikeService", "LikeState"]
