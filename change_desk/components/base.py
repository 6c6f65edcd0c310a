"""
Component Base Class

Shared plumbing for the workflow components: injected collaborators,
change callbacks and notification helpers.
"""

import logging
from typing import Any, Callable, List, Optional

from change_desk.backends.protocol import ChangeRequestBackend
from change_desk.errors import extract_error_message
from change_desk.notifications import Notifier, Severity
from change_desk.signals import SignalBus

logger = logging.getLogger(__name__)


class Component:
    """Base class for view-model components.

    Args:
        backend: Controller the component calls
        bus: Signal bus scoped to the composed view
        notifier: Destination for user-facing notifications
    """

    def __init__(
        self,
        backend: ChangeRequestBackend,
        bus: Optional[SignalBus] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.backend = backend
        self.bus = bus or SignalBus()
        self.notifier = notifier or Notifier()
        self._change_callbacks: List[Callable[[], None]] = []

    def on_change(self, callback: Callable[[], None]) -> None:
        """Register a callback for state changes (views re-render)."""
        self._change_callbacks.append(callback)

    def _changed(self) -> None:
        for callback in list(self._change_callbacks):
            callback()

    def show_toast(
        self,
        title: str,
        message: str,
        severity: Severity = Severity.INFO,
    ) -> None:
        self.notifier.notify(title, message, severity)

    def _show_error(self, title: str, err: Any) -> str:
        message = extract_error_message(err)
        self.show_toast(title, message, Severity.ERROR)
        return message
