"""
Change Desk - Change Request Approval Workflow

Students submit change requests for their email, phone or mailing address;
staff review, approve or reject them.

Primary API:
    from change_desk import (
        ApprovalList, InMemoryChangeRequestBackend, RequestDetail,
        RequestManager, SignalBus,
    )

    backend = InMemoryChangeRequestBackend()
    bus = SignalBus()
    manager = RequestManager(
        ApprovalList(backend, bus=bus),
        RequestDetail(backend, bus=bus),
        bus=bus,
    )
    await manager.load()

Features:
- View-model components for the submission form, approval list, review
  panel and the manager composing them
- Wired queries with manual refresh
- Signals scoped to one composed view
- In-memory and HTTP controller backends
"""

__version__ = "0.1.0"

# Backends
from change_desk.backends import (
    ChangeRequestBackend,
    HttpChangeRequestBackend,
    InMemoryChangeRequestBackend,
    Student,
)

# Components
from change_desk.components import (
    ApprovalList,
    RequestDetail,
    RequestManager,
    RequestRow,
    RequestView,
    SubmissionForm,
)

# Errors
from change_desk.errors import (
    ChangeDeskError,
    ConfigError,
    ConflictError,
    NotFoundError,
    RemoteCallError,
    extract_error_message,
)

# Formatting
from change_desk.formatting import preview_value, render_value

# Model
from change_desk.models import ChangeRequest, RequestStatus, RequestType

# Plumbing
from change_desk.notifications import Notification, Notifier, Severity
from change_desk.signals import (
    ACTION_COMPLETED,
    REQUEST_SELECTED,
    SUBMITTED,
    SignalBus,
)
from change_desk.wire import WiredQuery, WireResult

__all__ = [
    "__version__",
    # Backends
    "ChangeRequestBackend",
    "HttpChangeRequestBackend",
    "InMemoryChangeRequestBackend",
    "Student",
    # Components
    "ApprovalList",
    "RequestDetail",
    "RequestManager",
    "RequestRow",
    "RequestView",
    "SubmissionForm",
    # Errors
    "ChangeDeskError",
    "ConfigError",
    "ConflictError",
    "NotFoundError",
    "RemoteCallError",
    "extract_error_message",
    # Formatting
    "preview_value",
    "render_value",
    # Model
    "ChangeRequest",
    "RequestStatus",
    "RequestType",
    # Plumbing
    "ACTION_COMPLETED",
    "REQUEST_SELECTED",
    "SUBMITTED",
    "Notification",
    "Notifier",
    "Severity",
    "SignalBus",
    "WiredQuery",
    "WireResult",
]
