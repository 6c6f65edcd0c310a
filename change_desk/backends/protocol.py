"""
Backend Protocol

Server-side controller operations the components consume. Every call is
asynchronous and may fail with RemoteCallError.
"""

from typing import List, Optional, Protocol, runtime_checkable

from change_desk.models import ChangeRequest


@runtime_checkable
class ChangeRequestBackend(Protocol):
    """
    Protocol for change request controllers.

    Implementations may be:
    - In-memory (InMemoryChangeRequestBackend)
    - Remote over HTTP (HttpChangeRequestBackend)
    """

    async def get_pending_requests(self) -> List[ChangeRequest]:
        """
        List requests that are still Pending.

        Returns:
            Pending requests, oldest first
        """
        ...

    async def get_request_by_id(self, request_id: str) -> ChangeRequest:
        """
        Fetch one request.

        Args:
            request_id: Request identifier

        Returns:
            The full record, whatever its status
        """
        ...

    async def create_request(
        self,
        student_id: str,
        request_type: str,
        new_value: str,
    ) -> str:
        """
        Create a Pending request.

        Args:
            student_id: Requester reference
            request_type: One of the RequestType values
            new_value: Requested value (JSON object text for addresses)

        Returns:
            The new request id
        """
        ...

    async def approve_request(self, request_id: str) -> None:
        """Approve a Pending request."""
        ...

    async def reject_request(self, request_id: str, reason: str) -> None:
        """Reject a Pending request with an optional reason."""
        ...

    async def get_current_contact(self, user_id: str) -> Optional[str]:
        """
        Resolve a user to the requester reference used on create.

        Returns:
            The contact id, or None if the user has no student record
        """
        ...
