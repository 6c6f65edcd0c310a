"""
Change Request Model

The single entity of the approval workflow and its enumerations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class RequestType(str, Enum):
    """Profile field a change request targets."""

    EMAIL = "Email"
    PHONE = "Phone"
    MAILING_ADDRESS = "MailingAddress"

    @property
    def label(self) -> str:
        """Human-readable label for pickers."""
        if self is RequestType.MAILING_ADDRESS:
            return "Mailing Address"
        return self.value

    @classmethod
    def options(cls) -> List[Tuple[str, str]]:
        """Selectable (label, value) pairs in display order."""
        return [(member.label, member.value) for member in cls]


class RequestStatus(str, Enum):
    """Lifecycle state. Pending is the only mutable state."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


def _coerce(enum_cls: Any, value: Any) -> Any:
    # Server data is authoritative: unknown values are kept for display
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class ChangeRequest:
    """A pending (or resolved) edit to a student's profile field."""

    id: str
    student_id: Optional[str] = None
    student_name: str = ""
    request_type: Union[RequestType, str, None] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    status: Union[RequestStatus, str] = RequestStatus.PENDING
    rejection_reason: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    @property
    def type_value(self) -> str:
        """Raw request type value, whether or not it is a known member."""
        if isinstance(self.request_type, RequestType):
            return self.request_type.value
        return self.request_type or ""

    @property
    def status_value(self) -> str:
        if isinstance(self.status, RequestStatus):
            return self.status.value
        return self.status or ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire shape."""
        return {
            "id": self.id,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "requestType": self.type_value or None,
            "oldValue": self.old_value,
            "newValue": self.new_value,
            "status": self.status_value,
            "rejectionReason": self.rejection_reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChangeRequest":
        """Create from the camelCase wire shape."""
        return cls(
            id=str(data.get("id", "")),
            student_id=data.get("studentId"),
            student_name=data.get("studentName") or "",
            request_type=_coerce(RequestType, data.get("requestType")),
            old_value=data.get("oldValue"),
            new_value=data.get("newValue"),
            status=_coerce(RequestStatus, data.get("status") or RequestStatus.PENDING),
            rejection_reason=data.get("rejectionReason"),
        )
