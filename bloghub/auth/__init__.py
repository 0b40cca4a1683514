"""Admin console authentication."""

from .service import AdminAuthService, PasswordChangeForm, SessionRegistry

__all__ = ["AdminAuthService", "PasswordChangeForm", "SessionRegistry"]
