"""
Error classification for remote API failures.

Maps HTTP status codes and error bodies onto a small set of error classes
used to decide whether a failure is worth retrying at a higher level.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorClass(str, Enum):
    """Standard error classification for API responses."""

    INVALID_REQUEST = "invalid_request"
    """Malformed request body or invalid parameters."""

    AUTHENTICATION = "authentication"
    """Missing or invalid API key."""

    PERMISSION_DENIED = "permission_denied"
    """Key is valid but not permitted to access the resource."""

    NOT_FOUND = "not_found"
    """Requested resource (batch, model) not found."""

    RATE_LIMITED = "rate_limited"
    """Throttled due to request or token limits."""

    REQUEST_TOO_LARGE = "request_too_large"
    """Payload or context too large."""

    TIMEOUT = "timeout"
    """Request timed out."""

    SERVER_ERROR = "server_error"
    """Transient server-side failure (5xx)."""

    OVERLOADED = "overloaded"
    """Service temporarily overloaded."""

    OTHER = "other"
    """Unknown classification."""


_RETRYABLE_CLASSES: frozenset[ErrorClass] = frozenset(
    {
        ErrorClass.RATE_LIMITED,
        ErrorClass.TIMEOUT,
        ErrorClass.SERVER_ERROR,
        ErrorClass.OVERLOADED,
    }
)

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
    529: ErrorClass.OVERLOADED,
}

# Anthropic error envelope types, e.g. {"type": "error", "error": {"type": "overloaded_error"}}
_ERROR_TYPE_MAPPING: dict[str, ErrorClass] = {
    "invalid_request_error": ErrorClass.INVALID_REQUEST,
    "authentication_error": ErrorClass.AUTHENTICATION,
    "permission_error": ErrorClass.PERMISSION_DENIED,
    "not_found_error": ErrorClass.NOT_FOUND,
    "request_too_large": ErrorClass.REQUEST_TOO_LARGE,
    "rate_limit_error": ErrorClass.RATE_LIMITED,
    "timeout_error": ErrorClass.TIMEOUT,
    "api_error": ErrorClass.SERVER_ERROR,
    "overloaded_error": ErrorClass.OVERLOADED,
}


def classify_http_error(
    status_code: int,
    body: dict[str, Any] | None = None,
) -> ErrorClass:
    """Classify an HTTP error into a standard error class.

    The error type in the body wins over the status code because it is
    more specific (a 400 may carry ``request_too_large``).

    Args:
        status_code: HTTP status code
        body: Response body (parsed JSON)

    Returns:
        ErrorClass representing the error type
    """
    error_type = extract_error_type(body)
    if error_type and error_type in _ERROR_TYPE_MAPPING:
        return _ERROR_TYPE_MAPPING[error_type]

    if status_code in _DEFAULT_STATUS_MAPPING:
        return _DEFAULT_STATUS_MAPPING[status_code]

    if 400 <= status_code < 500:
        return ErrorClass.INVALID_REQUEST
    if 500 <= status_code < 600:
        return ErrorClass.SERVER_ERROR

    return ErrorClass.OTHER


def is_retryable(error_class: ErrorClass) -> bool:
    """Check if an error class is retryable by default."""
    return error_class in _RETRYABLE_CLASSES


def extract_error_type(body: dict[str, Any] | None) -> str | None:
    """Extract the provider error type from a response body."""
    if not body:
        return None

    error = body.get("error")
    if isinstance(error, dict):
        error_type = error.get("type")
        if isinstance(error_type, str):
            return error_type
    return None


def extract_error_message(body: dict[str, Any] | None) -> str | None:
    """Extract error message from response body.

    Supports:
    - Anthropic style: {"type": "error", "error": {"type": "...", "message": "..."}}
    - Simple: {"message": "..."}
    - Detail field: {"detail": "..."}

    Args:
        body: Response body (parsed JSON)

    Returns:
        Error message if found, None otherwise
    """
    if not body:
        return None

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
