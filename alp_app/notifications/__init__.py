"""
User-visible notification sinks.

Action outcomes and failures are reported through a notifier so that the
dashboard never depends on a particular toast/notification mechanism.
"""
from .base import BaseNotifier, Notification, NotificationLevel
from .recording import RecordingNotifier
from .stdout_notifier import StdoutNotifier

__all__ = [
    "BaseNotifier",
    "Notification",
    "NotificationLevel",
    "RecordingNotifier",
    "StdoutNotifier",
]
