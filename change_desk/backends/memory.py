"""
In-Memory Backend

Change requests, students and user mappings kept in dictionaries. Enforces
the server-side rules of the workflow. Useful for testing, demos and the
reference service.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from change_desk.errors import ConflictError, NotFoundError, RemoteCallError
from change_desk.models import ChangeRequest, RequestStatus, RequestType

logger = logging.getLogger(__name__)

# Student profile attribute updated by each request type
PROFILE_FIELDS = {
    RequestType.EMAIL: "email",
    RequestType.PHONE: "phone",
    RequestType.MAILING_ADDRESS: "mailing_address",
}


@dataclass
class Student:
    """A requester and the profile fields a request can change."""

    id: str
    name: str
    email: str = ""
    phone: str = ""
    mailing_address: Dict[str, Any] = field(default_factory=dict)

    def get_field(self, request_type: RequestType) -> str:
        value = getattr(self, PROFILE_FIELDS[request_type])
        if isinstance(value, dict):
            return json.dumps(value) if value else ""
        return value

    def set_field(self, request_type: RequestType, value: str) -> None:
        if request_type is RequestType.MAILING_ADDRESS:
            try:
                parsed = json.loads(value)
            except ValueError:
                parsed = {"street": value}
            if not isinstance(parsed, dict):
                parsed = {"street": value}
            self.mailing_address = parsed
        else:
            setattr(self, PROFILE_FIELDS[request_type], value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "mailingAddress": self.mailing_address,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Student":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            mailing_address=data.get("mailingAddress") or {},
        )


def _bad_request(message: str) -> RemoteCallError:
    return RemoteCallError(message, body={"message": message}, status_code=400)


class InMemoryChangeRequestBackend:
    """
    In-memory change request controller.

    Requests don't persist across sessions unless dumped with save_seed().
    """

    def __init__(
        self,
        students: Optional[List[Student]] = None,
        users: Optional[Dict[str, str]] = None,
    ) -> None:
        self._students: Dict[str, Student] = {s.id: s for s in students or []}
        self._users: Dict[str, str] = dict(users or {})
        self._requests: Dict[str, ChangeRequest] = {}
        self._id_counter = 0

    # --- Directory ---

    def add_student(self, student: Student, user_id: Optional[str] = None) -> None:
        """Register a student, optionally linked to a login user."""
        self._students[student.id] = student
        if user_id:
            self._users[user_id] = student.id

    def get_student(self, student_id: str) -> Optional[Student]:
        return self._students.get(student_id)

    def all_requests(self) -> List[ChangeRequest]:
        return list(self._requests.values())

    # --- Controller operations ---

    async def get_pending_requests(self) -> List[ChangeRequest]:
        return [r for r in self._requests.values() if r.is_pending]

    async def get_request_by_id(self, request_id: str) -> ChangeRequest:
        return self._get(request_id)

    async def create_request(
        self,
        student_id: str,
        request_type: str,
        new_value: str,
    ) -> str:
        student = self._students.get(student_id) if student_id else None
        if student is None:
            raise _bad_request(f"Unknown student: {student_id}")
        try:
            kind = RequestType(request_type)
        except ValueError:
            raise _bad_request(f"Invalid request type: {request_type}")
        if not new_value or not new_value.strip():
            raise _bad_request("New value is required")

        request_id = self._next_id()
        self._requests[request_id] = ChangeRequest(
            id=request_id,
            student_id=student.id,
            student_name=student.name,
            request_type=kind,
            old_value=student.get_field(kind),
            new_value=new_value,
            status=RequestStatus.PENDING,
        )
        logger.info(f"Created {request_id} ({kind.value}) for student {student.id}")
        return request_id

    async def approve_request(self, request_id: str) -> None:
        request = self._get_pending(request_id)
        student = self._students.get(request.student_id or "")
        if student is not None and isinstance(request.request_type, RequestType):
            student.set_field(request.request_type, request.new_value or "")
        request.status = RequestStatus.APPROVED
        logger.info(f"Approved {request_id}")

    async def reject_request(self, request_id: str, reason: str) -> None:
        request = self._get_pending(request_id)
        request.status = RequestStatus.REJECTED
        request.rejection_reason = reason or None
        logger.info(f"Rejected {request_id}")

    async def get_current_contact(self, user_id: str) -> Optional[str]:
        return self._users.get(user_id)

    # --- Internals ---

    def _next_id(self) -> str:
        while True:
            self._id_counter += 1
            request_id = f"CR-{self._id_counter:06d}"
            if request_id not in self._requests:
                return request_id

    def _get(self, request_id: str) -> ChangeRequest:
        request = self._requests.get(request_id)
        if request is None:
            message = f"Change request not found: {request_id}"
            raise NotFoundError(message, body={"message": message}, status_code=404)
        return request

    def _get_pending(self, request_id: str) -> ChangeRequest:
        request = self._get(request_id)
        if not request.is_pending:
            message = f"Change request {request_id} is already {request.status_value}"
            raise ConflictError(message, body={"message": message}, status_code=409)
        return request

    # --- Seed files ---

    def load_seed(self, path: Union[str, Path]) -> int:
        """Load students, users and requests from a JSON seed file.

        Returns:
            Number of requests loaded
        """
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        for student_data in data.get("students", []):
            self.add_student(Student.from_dict(student_data))
        self._users.update(data.get("users", {}))

        loaded = 0
        for request_data in data.get("requests", []):
            request = ChangeRequest.from_dict(request_data)
            if not request.id:
                request.id = self._next_id()
            if not request.student_name and request.student_id in self._students:
                request.student_name = self._students[request.student_id].name
            self._requests[request.id] = request
            loaded += 1

        logger.info(f"Loaded {loaded} requests from {path}")
        return loaded

    def save_seed(self, path: Union[str, Path]) -> int:
        """Write the current state to a JSON seed file."""
        path = Path(path)
        data = {
            "students": [s.to_dict() for s in self._students.values()],
            "users": self._users,
            "requests": [r.to_dict() for r in self._requests.values()],
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        return len(self._requests)
