"""
Request Manager

Composes the Approval List and the Detail panel and routes signals
between them. Owns only the selected request id.
"""

import logging
from typing import Callable, List, Optional

from change_desk.components.approval_list import ApprovalList
from change_desk.components.detail import RequestDetail
from change_desk.signals import ACTION_COMPLETED, REQUEST_SELECTED, SignalBus

logger = logging.getLogger(__name__)


class RequestManager:
    """Event routing between a list and a detail panel.

    Both children must share the manager's bus.
    """

    def __init__(
        self,
        approval_list: ApprovalList,
        detail: RequestDetail,
        bus: Optional[SignalBus] = None,
    ):
        self.approval_list = approval_list
        self.detail = detail
        self.bus = bus or approval_list.bus
        self.selected_request_id: Optional[str] = None
        self._change_callbacks: List[Callable[[], None]] = []
        self._disconnects = [
            self.bus.connect(REQUEST_SELECTED, self.handle_request_selected),
            self.bus.connect(ACTION_COMPLETED, self.handle_action_completed),
        ]

    def on_change(self, callback: Callable[[], None]) -> None:
        """Register a callback for selection changes."""
        self._change_callbacks.append(callback)

    def _changed(self) -> None:
        for callback in list(self._change_callbacks):
            callback()

    async def load(self) -> None:
        await self.approval_list.load()

    async def handle_request_selected(self, request_id: str) -> None:
        logger.debug(f"Selected {request_id}")
        self.selected_request_id = request_id
        self._changed()
        await self.detail.set_record_id(request_id)

    async def handle_action_completed(self, _payload=None) -> None:
        self.selected_request_id = None
        self._changed()
        await self.detail.set_record_id(None)
        await self.approval_list.refresh_list()

    def close(self) -> None:
        """Disconnect from the bus."""
        for disconnect in self._disconnects:
            disconnect()
        self._disconnects = []
