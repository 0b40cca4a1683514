"""Transient user notifications (the toasts shown after an action)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from loguru import logger

Level = Literal["success", "info", "warning", "error"]

_LOG_LEVEL: dict[str, str] = {
    "success": "SUCCESS",
    "info": "INFO",
    "warning": "WARNING",
    "error": "ERROR",
}


@dataclass(frozen=True, slots=True)
class Notification:
    level: Level
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"level": self.level, "message": self.message}


@dataclass(slots=True)
class Notifier:
    """Collects notifications until the presenting layer drains them."""

    pending: list[Notification] = field(default_factory=list)

    def notify(self, level: Level, message: str) -> Notification:
        notification = Notification(level, message)
        self.pending.append(notification)
        logger.log(_LOG_LEVEL[level], "[toast] {}", message)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify("success", message)

    def info(self, message: str) -> Notification:
        return self.notify("info", message)

    def warning(self, message: str) -> Notification:
        return self.notify("warning", message)

    def error(self, message: str) -> Notification:
        return self.notify("error", message)

    def drain(self) -> list[Notification]:
        drained, self.pending = self.pending, []
        return drained

    def messages(self) -> list[str]:
        return [item.message for item in self.pending]


__all__ = ["Notification", "Notifier", "Level"]
