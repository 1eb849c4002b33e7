"""Base classes for notification sinks."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class NotificationLevel(Enum):
    """Severity of a notification."""
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A message for the user."""
    title: str
    description: str
    level: NotificationLevel = NotificationLevel.INFO
    context: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "level": self.level.value,
            "context": self.context,
            "created_at": self.created_at.isoformat(),
        }


class BaseNotifier(ABC):
    """Base class for notification sinks."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"dashboard.notifications.{name}")
        self._sent_count = 0
        self._error_count = 0

    @abstractmethod
    def send(self, notification: Notification) -> None:
        """Deliver a single notification."""
        pass

    def notify(self, title: str, description: str,
               level: NotificationLevel = NotificationLevel.INFO,
               context: Optional[dict[str, Any]] = None) -> Notification:
        """Build and deliver a notification. Delivery failures are logged, not raised."""
        notification = Notification(
            title=title,
            description=description,
            level=level,
            context=context or {},
        )

        try:
            self.send(notification)
            self._sent_count += 1
        except Exception as e:
            self._error_count += 1
            self.logger.error("Notification delivery failed: %s (%s)", title, e)

        return notification

    def success(self, title: str, description: str, **context: Any) -> Notification:
        return self.notify(title, description, NotificationLevel.SUCCESS, context)

    def error(self, title: str, description: str, **context: Any) -> Notification:
        return self.notify(title, description, NotificationLevel.ERROR, context)

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "sent_count": self._sent_count,
            "error_count": self._error_count,
        }
