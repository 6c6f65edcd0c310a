"""
HTTP Backend

Change request controller reached over the REST routes of a change desk
service.

Usage:
    backend = HttpChangeRequestBackend("http://localhost:8040", api_token="...")
    pending = await backend.get_pending_requests()
    await backend.aclose()
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from change_desk.errors import ConflictError, NotFoundError, RemoteCallError
from change_desk.models import ChangeRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def _error_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        text = response.text.strip() or response.reason_phrase
        return {"message": text}
    # FastAPI's default error shape
    detail = body.get("detail")
    if "message" not in body and isinstance(detail, str):
        body["message"] = detail
    return body


class HttpChangeRequestBackend:
    """
    Change request controller over HTTP.

    Args:
        service_url: Base URL of the service
        api_token: Optional bearer token
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests use ASGITransport)
    """

    def __init__(
        self,
        service_url: str,
        api_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.service_url = service_url.rstrip("/")
        self.api_token = api_token
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpChangeRequestBackend":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.service_url,
                headers=self._get_headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _call(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self._get_client().request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise RemoteCallError(str(e) or type(e).__name__) from e

        if response.is_success:
            if not response.content:
                return None
            return response.json()

        body = _error_body(response)
        message = f"{method} {path} returned {response.status_code}"
        logger.warning(f"{message}: {body.get('message')}")
        if response.status_code == 404:
            raise NotFoundError(message, body=body, status_code=404)
        if response.status_code == 409:
            raise ConflictError(message, body=body, status_code=409)
        raise RemoteCallError(message, body=body, status_code=response.status_code)

    async def get_pending_requests(self) -> List[ChangeRequest]:
        data = await self._call("GET", "/change-requests/pending")
        return [ChangeRequest.from_dict(item) for item in data or []]

    async def get_request_by_id(self, request_id: str) -> ChangeRequest:
        data = await self._call("GET", f"/change-requests/{request_id}")
        return ChangeRequest.from_dict(data)

    async def create_request(
        self,
        student_id: str,
        request_type: str,
        new_value: str,
    ) -> str:
        data = await self._call(
            "POST",
            "/change-requests",
            json={
                "studentId": student_id,
                "requestType": request_type,
                "newValue": new_value,
            },
        )
        return str(data["id"])

    async def approve_request(self, request_id: str) -> None:
        await self._call("POST", f"/change-requests/{request_id}/approve")

    async def reject_request(self, request_id: str, reason: str) -> None:
        await self._call(
            "POST",
            f"/change-requests/{request_id}/reject",
            json={"reason": reason},
        )

    async def get_current_contact(self, user_id: str) -> Optional[str]:
        try:
            data = await self._call("GET", f"/users/{user_id}")
        except NotFoundError:
            return None
        return (data or {}).get("contactId")
