"""
Approval List

Pending change requests with a row action that opens one for review.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from change_desk.components.base import Component
from change_desk.errors import extract_error_message
from change_desk.formatting import preview_value
from change_desk.models import ChangeRequest
from change_desk.notifications import Severity
from change_desk.signals import REQUEST_SELECTED
from change_desk.wire import WiredQuery, WireResult

logger = logging.getLogger(__name__)

OPEN_ACTION = "open"

COLUMNS: List[Dict[str, Any]] = [
    {"label": "Student", "field_name": "student_name"},
    {"label": "Type", "field_name": "request_type"},
    {"label": "New Value", "field_name": "new_value_preview"},
    {"type": "action", "row_actions": [{"label": "Open", "name": OPEN_ACTION}]},
]


@dataclass
class RequestRow:
    """List projection of one pending request."""

    id: str
    student_name: str
    request_type: str
    new_value_preview: Optional[str]

    @classmethod
    def from_request(cls, request: ChangeRequest) -> "RequestRow":
        return cls(
            id=request.id,
            student_name=request.student_name or "",
            request_type=request.type_value,
            new_value_preview=preview_value(request.new_value),
        )


class ApprovalList(Component):
    """Pending request list.

    Emits ``requestselected`` with a row id when the row's Open action is
    used; it never fetches detail itself.
    """

    columns = COLUMNS

    def __init__(self, backend, bus=None, notifier=None):
        super().__init__(backend, bus=bus, notifier=notifier)
        self.requests: List[RequestRow] = []
        self._wired_requests_result: Optional[WiredQuery[List[ChangeRequest]]] = None
        self._refreshing = False

    @property
    def is_empty(self) -> bool:
        return not self.requests

    async def load(self) -> None:
        """Subscribe to the pending set (first fetch)."""
        if self._wired_requests_result is None:
            wire: WiredQuery[List[ChangeRequest]] = WiredQuery(
                self.backend.get_pending_requests,
                name="pending_requests",
            )
            wire.subscribe(self._wired_requests)
            self._wired_requests_result = wire
        await self._wired_requests_result.start()

    def _wired_requests(self, result: WireResult[List[ChangeRequest]]) -> None:
        if result.error is not None:
            # A failed refresh keeps the rows on screen; refresh_list reports it
            if self._refreshing:
                return
            self.requests = []
            self._show_error("Error loading", result.error)
        else:
            self.requests = [RequestRow.from_request(r) for r in result.data or []]
        self._changed()

    def get_row(self, request_id: str) -> Optional[RequestRow]:
        for row in self.requests:
            if row.id == request_id:
                return row
        return None

    async def handle_row_action(self, action_name: str, row: RequestRow) -> None:
        """Dispatch a row action."""
        if action_name == OPEN_ACTION:
            await self.bus.emit(REQUEST_SELECTED, row.id)

    async def refresh_list(self) -> None:
        """Re-run the pending-set query through the cached wire handle.

        Failures become a single error notification, keep the current rows
        and are never raised.
        """
        if self._wired_requests_result is None:
            return
        self._refreshing = True
        try:
            await self._wired_requests_result.refresh()
        except Exception as e:
            self.show_toast(
                "Error",
                f"Failed to refresh the list: {extract_error_message(e)}",
                Severity.ERROR,
            )
        finally:
            self._refreshing = False
