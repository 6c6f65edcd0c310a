"""
Change Desk Errors

Exception types raised by controller backends and the helper that turns
any caught failure into a single user-facing message.
"""

import json
from typing import Any, Dict, Mapping, Optional

UNKNOWN_ERROR = "Unknown error"


class ChangeDeskError(Exception):
    """Base exception for change desk errors."""

    pass


class RemoteCallError(ChangeDeskError):
    """A server-side operation failed.

    Args:
        message: Generic description of the failure
        body: Decoded error payload returned by the server, if any
        status_code: HTTP status code, if the call went over HTTP
    """

    def __init__(
        self,
        message: str = "",
        body: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.body = body or {}
        self.status_code = status_code


class NotFoundError(RemoteCallError):
    """Requested change request or user does not exist."""

    pass


class ConflictError(RemoteCallError):
    """Change request is no longer pending."""

    pass


class ConfigError(ChangeDeskError):
    """Configuration could not be read."""

    pass


def _field(source: Any, name: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def extract_error_message(err: Any) -> str:
    """Extract a user-facing message from a caught failure.

    Checked in order:
    1. a structured server message (``body.message``)
    2. a generic ``message`` field
    3. a stringified form of the whole error

    Args:
        err: Exception or error payload; may be None

    Returns:
        Message suitable for a notification
    """
    if err is None:
        return UNKNOWN_ERROR
    if isinstance(err, str):
        return err or UNKNOWN_ERROR

    body = _field(err, "body")
    if body:
        structured = _field(body, "message")
        if structured:
            return str(structured)

    message = _field(err, "message")
    if message:
        return str(message)
    if isinstance(err, BaseException) and not isinstance(err, Mapping):
        text = str(err)
        if text:
            return text
        return repr(err)

    try:
        return json.dumps(err)
    except (TypeError, ValueError):
        return str(err)
