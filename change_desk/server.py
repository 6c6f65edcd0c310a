"""
Reference Change Desk Service

A small FastAPI app exposing a change request backend over the REST
routes HttpChangeRequestBackend calls. Meant for local development and
tests, on top of the in-memory backend.

Usage:
    uvicorn change_desk.server:app --port 8040
    changedesk serve --seed seed.json
"""

import logging
import os
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from change_desk.backends.memory import InMemoryChangeRequestBackend
from change_desk.backends.protocol import ChangeRequestBackend
from change_desk.errors import RemoteCallError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CreateRequestBody(BaseModel):
    studentId: Optional[str] = None
    requestType: Optional[str] = None
    newValue: Optional[str] = None


class RejectRequestBody(BaseModel):
    reason: Optional[str] = None


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(backend: Optional[ChangeRequestBackend] = None) -> FastAPI:
    """Build the service around a backend (in-memory by default)."""
    backend = backend or InMemoryChangeRequestBackend()

    app = FastAPI(title="Change Desk")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.state.backend = backend

    @app.exception_handler(RemoteCallError)
    async def remote_call_error_handler(request: Request, exc: RemoteCallError):
        body = exc.body or {"message": exc.message}
        return JSONResponse(status_code=exc.status_code or 400, content=body)

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/change-requests/pending")
    async def get_pending_requests() -> List[Dict[str, Any]]:
        return [r.to_dict() for r in await backend.get_pending_requests()]

    @app.get("/change-requests/{request_id}")
    async def get_request_by_id(request_id: str) -> Dict[str, Any]:
        request = await backend.get_request_by_id(request_id)
        return request.to_dict()

    @app.post("/change-requests", status_code=201)
    async def create_request(body: CreateRequestBody) -> Dict[str, str]:
        request_id = await backend.create_request(
            student_id=body.studentId or "",
            request_type=body.requestType or "",
            new_value=body.newValue or "",
        )
        return {"id": request_id}

    @app.post("/change-requests/{request_id}/approve")
    async def approve_request(request_id: str) -> Dict[str, str]:
        await backend.approve_request(request_id)
        return {"status": "Approved"}

    @app.post("/change-requests/{request_id}/reject")
    async def reject_request(
        request_id: str,
        body: Optional[RejectRequestBody] = None,
    ) -> Dict[str, str]:
        reason = body.reason if body else None
        await backend.reject_request(request_id, reason or "")
        return {"status": "Rejected"}

    @app.get("/users/{user_id}")
    async def get_user(user_id: str):
        contact_id = await backend.get_current_contact(user_id)
        if contact_id is None:
            return JSONResponse(
                status_code=404,
                content={"message": f"User {user_id} has no student record"},
            )
        return {"userId": user_id, "contactId": contact_id}

    return app


def _default_app() -> FastAPI:
    backend = InMemoryChangeRequestBackend()
    seed = os.getenv("CHANGEDESK_SEED_FILE")
    if seed:
        backend.load_seed(seed)
    return create_app(backend)


app = _default_app()
