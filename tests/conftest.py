"""
Pytest Configuration and Shared Fixtures

Provides backends and component wiring for testing change_desk.
"""

from typing import Any, Dict, List, Optional

import pytest

from change_desk.backends.memory import InMemoryChangeRequestBackend, Student
from change_desk.errors import RemoteCallError
from change_desk.models import ChangeRequest, RequestStatus, RequestType
from change_desk.notifications import Notifier
from change_desk.signals import SignalBus

LONG_VALUE = "x" * 75


class RecordingBackend:
    """Backend double that records every call.

    Set ``failures[operation]`` to an exception to make that operation
    raise it.
    """

    def __init__(self, requests: Optional[List[ChangeRequest]] = None) -> None:
        self.requests: Dict[str, ChangeRequest] = {r.id: r for r in requests or []}
        self.contacts: Dict[str, str] = {"u-ada": "003-ADA"}
        self.calls: List[tuple] = []
        self.failures: Dict[str, BaseException] = {}
        self.next_id = "CR-NEW"

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, *args))
        if operation in self.failures:
            raise self.failures[operation]

    async def get_pending_requests(self) -> List[ChangeRequest]:
        self._record("get_pending_requests")
        return [r for r in self.requests.values() if r.is_pending]

    async def get_request_by_id(self, request_id: str) -> ChangeRequest:
        self._record("get_request_by_id", request_id)
        if request_id not in self.requests:
            raise RemoteCallError("not found", body={"message": f"No request {request_id}"})
        return self.requests[request_id]

    async def create_request(self, student_id: str, request_type: str, new_value: str) -> str:
        self._record("create_request", student_id, request_type, new_value)
        self.requests[self.next_id] = ChangeRequest(
            id=self.next_id,
            student_id=student_id,
            request_type=RequestType(request_type),
            new_value=new_value,
        )
        return self.next_id

    async def approve_request(self, request_id: str) -> None:
        self._record("approve_request", request_id)
        self.requests[request_id].status = RequestStatus.APPROVED

    async def reject_request(self, request_id: str, reason: str) -> None:
        self._record("reject_request", request_id, reason)
        self.requests[request_id].status = RequestStatus.REJECTED
        self.requests[request_id].rejection_reason = reason

    async def get_current_contact(self, user_id: str) -> Optional[str]:
        self._record("get_current_contact", user_id)
        return self.contacts.get(user_id)


def sample_requests() -> List[ChangeRequest]:
    return [
        ChangeRequest(
            id="r1",
            student_id="003-ADA",
            student_name="Ada Lovelace",
            request_type=RequestType.MAILING_ADDRESS,
            old_value='{"street":"Old Rd","city":"London"}',
            new_value='{"street":"Main St","city":"Springfield"}',
        ),
        ChangeRequest(
            id="r2",
            student_id="003-ALAN",
            student_name="Alan Turing",
            request_type=RequestType.EMAIL,
            old_value="alan@example.edu",
            new_value=LONG_VALUE,
        ),
        ChangeRequest(
            id="r3",
            student_id="003-ADA",
            student_name="Ada Lovelace",
            request_type=RequestType.PHONE,
            new_value="555-0100",
            status=RequestStatus.APPROVED,
        ),
    ]


@pytest.fixture
def recording_backend() -> RecordingBackend:
    """Create a recording backend with two pending requests and one approved."""
    return RecordingBackend(sample_requests())


@pytest.fixture
def memory_backend() -> InMemoryChangeRequestBackend:
    """Create an in-memory backend with two students."""
    backend = InMemoryChangeRequestBackend()
    backend.add_student(
        Student(
            id="003-ADA",
            name="Ada Lovelace",
            email="ada@example.edu",
            phone="555-0100",
            mailing_address={"street": "Old Rd", "city": "London"},
        ),
        user_id="u-ada",
    )
    backend.add_student(
        Student(id="003-ALAN", name="Alan Turing", email="alan@example.edu"),
        user_id="u-alan",
    )
    return backend


@pytest.fixture
def bus() -> SignalBus:
    """Create a fresh signal bus."""
    return SignalBus()


@pytest.fixture
def notifier() -> Notifier:
    """Create a notifier without a sink."""
    return Notifier()
