"""
Notifications

User-facing toast messages raised by the components. A view supplies a
sink to display them (the TUI maps them onto ``App.notify``).
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Notification variants."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notification:
    """A dismissible message shown to the user."""

    title: str
    message: str
    severity: Severity = Severity.INFO
    timestamp: datetime = field(default_factory=datetime.now)


class Notifier:
    """Collects notifications and forwards them to an optional sink."""

    def __init__(
        self,
        sink: Optional[Callable[[Notification], None]] = None,
        max_history: int = 100,
    ):
        self._sink = sink
        self._max_history = max_history
        self.history: List[Notification] = []

    def set_sink(self, sink: Optional[Callable[[Notification], None]]) -> None:
        self._sink = sink

    def notify(
        self,
        title: str,
        message: str,
        severity: Severity = Severity.INFO,
    ) -> Notification:
        """Record a notification and hand it to the sink."""
        notification = Notification(title=title, message=message, severity=severity)
        self.history.append(notification)
        if len(self.history) > self._max_history:
            self.history.pop(0)

        if severity == Severity.ERROR:
            logger.info(f"{title}: {message}")
        else:
            logger.debug(f"{title}: {message}")

        if self._sink is not None:
            self._sink(notification)
        return notification

    @property
    def last(self) -> Optional[Notification]:
        """Most recent notification, if any."""
        return self.history[-1] if self.history else None

    def clear(self) -> None:
        self.history.clear()
