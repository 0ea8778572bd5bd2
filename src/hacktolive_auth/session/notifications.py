"""Semantic user notifications emitted by the session core.

The core decides *what* the user should be told; a presentation layer decides
how (toast, banner, flash message).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

_LOG = logging.getLogger("hacktolive.session.notifications")


class Level(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Notification:
    level: Level
    title: str
    description: str | None = None

    @classmethod
    def success(cls, title: str, description: str | None = None) -> Notification:
        return cls(Level.SUCCESS, title, description)

    @classmethod
    def error(cls, title: str, description: str | None = None) -> Notification:
        return cls(Level.ERROR, title, description)


@runtime_checkable
class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None: ...


class LoggingNotificationSink(NotificationSink):
    """Default sink: write notifications to the log."""

    def notify(self, notification: Notification) -> None:
        level = logging.WARNING if notification.level is Level.ERROR else logging.INFO
        _LOG.log(
            level,
            "%s%s",
            notification.title,
            f": {notification.description}" if notification.description else "",
        )
