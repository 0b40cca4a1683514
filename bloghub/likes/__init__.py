"""Article likes."""

from .service import LikeService, LikeState

__all__ = ["LikeService", "LikeState"]
