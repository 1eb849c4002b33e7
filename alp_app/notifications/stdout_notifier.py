"""Standard output notification sink."""

import json
import sys
from typing import Optional, TextIO

from .base import BaseNotifier, Notification


class StdoutNotifier(BaseNotifier):
    """Prints notifications, one per line."""

    def __init__(self, name: str = "stdout", format: str = "pretty", stream: Optional[TextIO] = None):
        super().__init__(name)
        self.format = format
        self.stream = stream or sys.stdout

    def send(self, notification: Notification) -> None:
        print(self._format(notification), file=self.stream, flush=True)

    def _format(self, notification: Notification) -> str:
        if self.format == "pretty":
            return (
                f"[{notification.created_at.isoformat()}] "
                f"{notification.level.value.upper()}: {notification.title} - {notification.description}"
            )
        return json.dumps(notification.to_dict(), default=str)
