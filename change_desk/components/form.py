"""
Submission Form

Collects a requester's intended change and submits it.
"""

import logging
from typing import List, Optional, Tuple

from change_desk.components.base import Component
from change_desk.models import RequestType
from change_desk.notifications import Severity
from change_desk.signals import SUBMITTED
from change_desk.wire import WiredQuery, WireResult

logger = logging.getLogger(__name__)


class SubmissionForm(Component):
    """Change request submission form.

    The current user is resolved to a requester reference through a wired
    query; nothing is submitted until that reference is known.

    Args:
        user_id: Login identity of the current user
    """

    request_type_options: List[Tuple[str, str]] = RequestType.options()

    def __init__(self, backend, user_id: Optional[str] = None, bus=None, notifier=None):
        super().__init__(backend, bus=bus, notifier=notifier)
        self.request_type: Optional[str] = None
        self.new_value: Optional[str] = None
        self.contact_id: Optional[str] = None
        self.submitting = False
        self._user_wire: WiredQuery[Optional[str]] = WiredQuery(
            backend.get_current_contact,
            params={"user_id": user_id},
            name="current_contact",
        )
        self._user_wire.subscribe(self._wired_user)

    async def load(self) -> None:
        """Resolve the current user's requester reference."""
        await self._user_wire.start()

    async def set_user(self, user_id: Optional[str]) -> None:
        await self._user_wire.set_params(user_id=user_id)

    def _wired_user(self, result: WireResult[Optional[str]]) -> None:
        if result.ok:
            self.contact_id = result.data
        else:
            logger.warning(f"Could not resolve current user: {result.error}")
        self._changed()

    def set_request_type(self, value: Optional[str]) -> None:
        self.request_type = value or None
        self._changed()

    def set_new_value(self, value: Optional[str]) -> None:
        self.new_value = value or None
        self._changed()

    def clear(self) -> None:
        """Reset both inputs."""
        self.request_type = None
        self.new_value = None
        self._changed()

    async def submit(self) -> Optional[str]:
        """Validate and create the request.

        Returns:
            The new request id, or None if nothing was created
        """
        if not self.contact_id:
            self.show_toast(
                "Error",
                "We could not identify your student record.",
                Severity.ERROR,
            )
            return None
        if not self.request_type or not self.new_value:
            self.show_toast(
                "Attention",
                "Fill in the request type and the new value.",
                Severity.WARNING,
            )
            return None

        self.submitting = True
        self._changed()
        try:
            request_id = await self.backend.create_request(
                student_id=self.contact_id,
                request_type=self.request_type,
                new_value=self.new_value,
            )
        except Exception as e:
            logger.warning(f"Create request failed: {e}")
            self._show_error("Error", e)
            return None
        finally:
            self.submitting = False
            self._changed()

        self.show_toast("Submitted", "Change request created.", Severity.SUCCESS)
        self.clear()
        await self.bus.emit(SUBMITTED, {"request_id": request_id})
        return request_id
