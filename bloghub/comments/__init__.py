"""Reader discussion and moderation."""

from .service import PREVIEW_SIZE, CommentForm, CommentService, ReplyForm, preview, search_comments

__all__ = ["CommentService", "CommentForm", "ReplyForm", "PREVIEW_SIZE", "preview", "search_comments"]
