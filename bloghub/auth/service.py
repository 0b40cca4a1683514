"""Admin authentication against the backend's ``admins`` table."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable

from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from bloghub.backend.client import BackendClient
from bloghub.errors import AuthenticationError, BackendError, NotFoundError
from bloghub.models import Admin
from bloghub.notifications import Notifier


class PasswordChangeForm(BaseModel):
    model_config = ConfigDict(extra="forbid")

    current_password: str
    new_password: str
    confirm_password: str

    @field_validator("current_password")
    @classmethod
    def _current(cls, value: str) -> str:
        if not value:
            raise ValueError("Current password is required")
        return value

    @field_validator("new_password", "confirm_password")
    @classmethod
    def _length(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value

    @model_validator(mode="after")
    def _matches(self) -> "PasswordChangeForm":
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class AdminAuthService:
    """Credential checks and password changes for console administrators."""

    TABLE = "admins"

    def __init__(self, client: BackendClient, notifier: Notifier | None = None) -> None:
        self.client = client
        self.notifier = notifier or Notifier()

    def login(self, username: str, password: str) -> Admin:
        if not username or not password:
            self.notifier.error("Please enter both username and password")
            raise AuthenticationError("Username and password are required")

        try:
            admin = self._lookup(username, password)
        except BackendError:
            self.notifier.error("Login failed. Please check your credentials.")
            raise
        if admin is None:
            self.notifier.error("Invalid credentials")
            raise AuthenticationError("Invalid credentials")

        logger.info("Admin '{}' logged in", admin.username)
        self.notifier.success("Login successful")
        return admin

    def verify_password(self, admin: Admin, password: str) -> bool:
        if not password:
            return False
        return self._lookup(admin.username, password) is not None

    def change_password(self, admin: Admin, form: PasswordChangeForm) -> None:
        if not self.verify_password(admin, form.current_password):
            self.notifier.error("Current password is incorrect")
            raise AuthenticationError("Current password is incorrect")
        try:
            self.client.update(self.TABLE, {"password": form.new_password}, filters=[("id", "eq", admin.id)])
        except BackendError:
            self.notifier.error("Failed to update password")
            raise
        logger.info("Password changed for admin '{}'", admin.username)
        self.notifier.success("Password updated successfully")

    def _lookup(self, username: str, password: str) -> Admin | None:
        try:
            row = self.client.select(
                self.TABLE,
                filters=[("username", "eq", username), ("password", "eq", password)],
                single=True,
            )
        except NotFoundError:
            return None
        return Admin.from_row(row)


@dataclass(slots=True)
class _Session:
    admin: Admin
    expires_at: float


class SessionRegistry:
    """In-memory admin sessions keyed by opaque bearer tokens."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = Lock()
        self._sessions: dict[str, _Session] = {}

    def issue(self, admin: Admin) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._sessions[token] = _Session(admin, self._clock() + self.ttl_seconds)
        return token

    def resolve(self, token: str | None) -> Admin | None:
        if not token:
            return None
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if session.expires_at <= self._clock():
                del self._sessions[token]
                logger.info("Session for '{}' expired", session.admin.username)
                return None
            return session.admin

    def revoke(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = ["AdminAuthService", "PasswordChangeForm", "SessionRegistry"]
