"""
Detail/Review Panel

Shows one change request and exposes the Approve and Reject actions.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from change_desk.components.base import Component
from change_desk.formatting import render_value
from change_desk.models import ChangeRequest
from change_desk.notifications import Severity
from change_desk.signals import ACTION_COMPLETED
from change_desk.wire import WiredQuery, WireResult

logger = logging.getLogger(__name__)


@dataclass
class RequestView:
    """Detail projection of a change request."""

    id: str
    student_id: Optional[str]
    student_name: str
    request_type: str
    old_value: Optional[str]
    new_value: Optional[str]
    status: str

    @classmethod
    def from_request(cls, request: ChangeRequest) -> "RequestView":
        return cls(
            id=request.id,
            student_id=request.student_id,
            student_name=request.student_name or "",
            request_type=request.type_value,
            old_value=request.old_value,
            new_value=request.new_value,
            status=request.status_value,
        )


class RequestDetail(Component):
    """Review panel bound to an externally supplied request id.

    Args:
        guard_in_flight: Ignore approve/reject while a previous one is
            still awaiting the server
    """

    def __init__(self, backend, bus=None, notifier=None, guard_in_flight: bool = False):
        super().__init__(backend, bus=bus, notifier=notifier)
        self.request: Optional[RequestView] = None
        self.reason: Optional[str] = None
        self.guard_in_flight = guard_in_flight
        self.in_flight = False
        self._wire: WiredQuery[ChangeRequest] = WiredQuery(
            backend.get_request_by_id,
            params={"request_id": None},
            name="request_by_id",
        )
        self._wire.subscribe(self._wired_request)

    @property
    def record_id(self) -> Optional[str]:
        return self._wire.params.get("request_id")

    async def set_record_id(self, request_id: Optional[str]) -> None:
        """Bind a request id; the record is fetched again when it changes.

        The rejection reason belongs to the bound request and is reset
        whenever a different id (or none) is bound.
        """
        if request_id is None or request_id != self.record_id:
            self.reason = None
        await self._wire.set_params(request_id=request_id)

    def _wired_request(self, result: WireResult[ChangeRequest]) -> None:
        if result.data is not None:
            self.request = RequestView.from_request(result.data)
        elif result.error is not None:
            self.request = None
            self._show_error("Error", result.error)
        else:
            self.request = None
        self._changed()

    @property
    def rendered_new_value(self) -> str:
        if self.request is None or not self.request.new_value:
            return ""
        return render_value(self.request.new_value)

    @property
    def rendered_old_value(self) -> str:
        if self.request is None or not self.request.old_value:
            return ""
        return render_value(self.request.old_value)

    def set_reason(self, value: Optional[str]) -> None:
        self.reason = value

    async def approve(self) -> bool:
        """Approve the bound request. Returns True on success."""
        if not self.record_id:
            return False
        return await self._act(
            lambda request_id: self.backend.approve_request(request_id),
            success=("Approved", "Request approved."),
            failure_title="Error approving",
        )

    async def reject(self) -> bool:
        """Reject the bound request with the current reason."""
        if not self.record_id:
            return False
        reason = self.reason or ""
        return await self._act(
            lambda request_id: self.backend.reject_request(request_id, reason),
            success=("Rejected", "Request rejected."),
            failure_title="Error rejecting",
        )

    async def _act(
        self,
        call: Callable[[str], Awaitable[Any]],
        success: tuple,
        failure_title: str,
    ) -> bool:
        if self.guard_in_flight and self.in_flight:
            logger.debug(f"Ignoring action on {self.record_id}: previous call in flight")
            return False

        request_id = self.record_id
        self.in_flight = True
        self._changed()
        try:
            await call(request_id)
        except Exception as e:
            logger.warning(f"Action on {request_id} failed: {e}")
            self._show_error(failure_title, e)
            return False
        finally:
            self.in_flight = False
            self._changed()

        title, message = success
        self.show_toast(title, message, Severity.SUCCESS)
        await self.bus.emit(ACTION_COMPLETED)
        return True
