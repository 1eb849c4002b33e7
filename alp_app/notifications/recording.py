"""In-memory notification sink."""

from typing import Optional

from .base import BaseNotifier, Notification, NotificationLevel


class RecordingNotifier(BaseNotifier):
    """Keeps every notification in a list."""

    def __init__(self, name: str = "recording"):
        super().__init__(name)
        self.notifications: list[Notification] = []

    def send(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def last(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    def titles(self, level: Optional[NotificationLevel] = None) -> list[str]:
        return [n.title for n in self.notifications if level is None or n.level == level]

    def clear(self) -> None:
        self.notifications.clear()
