"""Exception hierarchy shared by the services and presentation layers."""

from __future__ import annotations


class BlogHubError(Exception):
    """Base class for all application errors."""


class BackendError(BlogHubError):
    """A call to the hosted backend failed (transport error or non-2xx status)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"


class NotFoundError(BackendError):
    """The requested row does not exist."""


class AuthenticationError(BlogHubError):
    """Admin credentials or session token were rejected."""


__all__ = ["BlogHubError", "BackendError", "NotFoundError", "AuthenticationError"]
