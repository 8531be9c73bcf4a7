"""Publish/subscribe surface for user-facing notifications."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List

from decrowdfund.shared.logging import get_logger

logger = get_logger(__name__)


class NotificationLevel(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A toast-style message for the presentation layer."""

    level: NotificationLevel
    message: str


NotificationHandler = Callable[[Notification], None]


@dataclass
class Notifier:
    """
    Fans notifications out to subscribers and keeps a history.

    A failing subscriber is logged and skipped so it cannot stop the others
    or the action that produced the notification.
    """

    history: List[Notification] = field(default_factory=list)
    _subscribers: List[NotificationHandler] = field(default_factory=list)

    def subscribe(self, handler: NotificationHandler) -> None:
        self._subscribers.append(handler)

    def publish(self, notification: Notification) -> None:
        self.history.append(notification)
        for handler in list(self._subscribers):
            try:
                handler(notification)
            except Exception:
                logger.exception(
                    f"Notification handler failed for {notification.level.value}"
                )

    def publish_level(self, level: NotificationLevel, message: str) -> None:
        self.publish(Notification(level, message))

    def success(self, message: str) -> None:
        self.publish(Notification(NotificationLevel.SUCCESS, message))

    def warning(self, message: str) -> None:
        self.publish(Notification(NotificationLevel.WARNING, message))

    def info(self, message: str) -> None:
        self.publish(Notification(NotificationLevel.INFO, message))

    def error(self, message: str) -> None:
        self.publish(Notification(NotificationLevel.ERROR, message))

    @property
    def last(self) -> Notification:
        return self.history[-1]
