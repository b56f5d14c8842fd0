"""Error classification for MCS voice responses.

Maps HTTP status codes to a small set of standard error classes and turns
non-2xx speech responses into library errors.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import TYPE_CHECKING, Any

from mcs_voice.errors.base import TransportError, UnauthorizedError

if TYPE_CHECKING:
    import httpx

    from mcs_voice.errors.base import VoiceError


class ErrorClass(str, Enum):
    """Standard error classification."""

    INVALID_REQUEST = "invalid_request"
    """Malformed request, invalid parameters, or unsupported operation."""

    AUTHENTICATION = "authentication"
    """Missing/invalid/expired access token."""

    PERMISSION_DENIED = "permission_denied"
    """Token is valid but lacks the scope for this endpoint."""

    NOT_FOUND = "not_found"
    """Requested resource not found."""

    REQUEST_TOO_LARGE = "request_too_large"
    """Audio or text payload too large."""

    RATE_LIMITED = "rate_limited"
    """Throttled by the service."""

    TIMEOUT = "timeout"
    """Request timed out or deadline exceeded."""

    SERVER_ERROR = "server_error"
    """Transient server-side failure (5xx)."""

    OVERLOADED = "overloaded"
    """Service overloaded / temporarily unavailable."""

    OTHER = "other"
    """Unknown classification."""


# Classes a caller may reasonably repeat; the library itself never retries.
_RETRYABLE_CLASSES: set[ErrorClass] = {
    ErrorClass.RATE_LIMITED,
    ErrorClass.TIMEOUT,
    ErrorClass.SERVER_ERROR,
    ErrorClass.OVERLOADED,
}

_DEFAULT_STATUS_MAPPING: dict[int, ErrorClass] = {
    400: ErrorClass.INVALID_REQUEST,
    401: ErrorClass.AUTHENTICATION,
    403: ErrorClass.PERMISSION_DENIED,
    404: ErrorClass.NOT_FOUND,
    408: ErrorClass.TIMEOUT,
    413: ErrorClass.REQUEST_TOO_LARGE,
    422: ErrorClass.INVALID_REQUEST,
    429: ErrorClass.RATE_LIMITED,
    500: ErrorClass.SERVER_ERROR,
    502: ErrorClass.SERVER_ERROR,
    503: ErrorClass.OVERLOADED,
    504: ErrorClass.TIMEOUT,
}


def classify_http_status(status_code: int) -> ErrorClass:
    """Classify an HTTP status code into a standard error class.

    Args:
        status_code: HTTP status code

    Returns:
        ErrorClass representing the error type
    """
    if status_code in _DEFAULT_STATUS_MAPPING:
        return _DEFAULT_STATUS_MAPPING[status_code]

    if 400 <= status_code < 500:
        return ErrorClass.INVALID_REQUEST
    if 500 <= status_code < 600:
        return ErrorClass.SERVER_ERROR

    return ErrorClass.OTHER


def is_retryable(error_class: ErrorClass) -> bool:
    """Check if an error class is worth repeating by the caller."""
    return error_class in _RETRYABLE_CLASSES


def extract_error_message(body: dict[str, Any] | None) -> str | None:
    """Extract error message from a decoded response body.

    Supports:
    - OAuth style: {"error": "invalid_client", "error_description": "..."}
    - Nested style: {"error": {"message": "..."}}
    - Simple: {"message": "..."} or {"detail": "..."}

    Args:
        body: Response body (parsed JSON)

    Returns:
        Error message if found, None otherwise
    """
    if not body:
        return None

    description = body.get("error_description")
    if isinstance(description, str) and description:
        return description

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            msg = error.get("message")
            if isinstance(msg, str):
                return msg
        elif isinstance(error, str):
            return error

    if "message" in body:
        msg = body["message"]
        if isinstance(msg, str):
            return msg

    if "detail" in body:
        detail = body["detail"]
        if isinstance(detail, str):
            return detail
        if isinstance(detail, list) and detail:
            return str(detail[0])

    return None


def decode_error_body(content: bytes) -> dict[str, Any] | None:
    """Best-effort JSON decode of an error body; None if it is not an object."""
    try:
        body = json.loads(content)
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def error_for_response(response: httpx.Response) -> VoiceError:
    """Build the error for a non-2xx speech response.

    The response body must already be read.

    Returns:
        UnauthorizedError for 401, TransportError carrying the status otherwise
    """
    try:
        url: str | None = str(response.request.url).split("?", 1)[0]
    except RuntimeError:
        url = None
    status = response.status_code
    if status == 401:
        return UnauthorizedError(url=url)

    error_class = classify_http_status(status)
    message = extract_error_message(decode_error_body(response.content)) or f"HTTP {status}"
    error = TransportError(message, url=url, status_code=status)
    error.context.details["error_class"] = error_class.value
    error.context.details["retryable"] = is_retryable(error_class)
    content_type = response.headers.get("content-type")
    if content_type:
        error.context.details["content_type"] = content_type
    return error
