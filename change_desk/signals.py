"""
Signal Bus

Component-boundary events, scoped to one composed view. A container
creates a bus and hands it to its children; there is no global event
namespace.

Usage:
    bus = SignalBus()
    bus.connect(REQUEST_SELECTED, manager.handle_request_selected)
    await bus.emit(REQUEST_SELECTED, "r1")
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

REQUEST_SELECTED = "requestselected"
ACTION_COMPLETED = "actioncompleted"
SUBMITTED = "submitted"

SignalHandler = Callable[[Any], Any]


class SignalBus:
    """Dispatches named signals to connected handlers.

    Handlers receive the signal payload (None when there is none) and may
    be plain callables or coroutine functions. They run one after another
    in connection order; a failing handler is logged and does not stop
    the others.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[SignalHandler]] = {}

    def connect(self, signal: str, handler: SignalHandler) -> Callable[[], None]:
        """Connect a handler to a signal.

        Returns:
            A callable that disconnects the handler again
        """
        self._handlers.setdefault(signal, []).append(handler)
        return lambda: self.disconnect(signal, handler)

    def disconnect(self, signal: str, handler: SignalHandler) -> bool:
        """Disconnect a handler. Returns True if it was connected."""
        handlers = self._handlers.get(signal, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def has_handlers(self, signal: str) -> bool:
        return bool(self._handlers.get(signal))

    async def emit(self, signal: str, payload: Any = None) -> None:
        """Emit a signal and wait for every handler to finish."""
        handlers = list(self._handlers.get(signal, []))
        logger.debug(f"Signal {signal} -> {len(handlers)} handler(s)")
        for handler in handlers:
            try:
                result = handler(payload)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.warning(f"Handler for signal {signal} raised: {e}")

    def clear(self) -> None:
        """Disconnect all handlers."""
        self._handlers.clear()
