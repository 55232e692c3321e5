"""错误基类：分层错误体系与结构化错误上下文。

Base error classes for anthropic-lib-python.

Provides a layered error hierarchy:
- AnthropicLibError: Base class for all library errors
- TransportError: Network/connection errors (not retried by the library)
- RemoteError: Error responses returned by the API
- ParsingError: A single malformed stream event or response body
- ValidationError: Invalid request parameters
- BatchTerminalError: Batch reached failed/expired without results
- NoResultsError: Terminal batch with nothing to fetch
- ToolError: Raised by tool handlers to report a failed tool call

Every error carries a ``kind`` string. Streams surface errors in-band as
``StreamError`` events using this kind.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from anthropic_lib_python.errors.classification import ErrorClass


@dataclass
class ErrorContext:
    """Structured error context for diagnostics."""

    field_path: str | None = None
    """Path to the problematic field (e.g., 'requests[3].custom_id')"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'transport', 'stream', 'batch')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.field_path:
            parts.append(f"at '{self.field_path}'")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class AnthropicLibError(Exception):
    """Base class for all anthropic-lib-python errors.

    Attributes:
        message: Human-readable error message
        context: Structured error context
        kind: Short machine-readable error kind
    """

    default_kind: ClassVar[str] = "error"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        kind: str | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        self.kind = kind or self.default_kind
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message

    def with_hint(self, hint: str) -> AnthropicLibError:
        """Add a hint to this error."""
        self.context.hint = hint
        return self


class TransportError(AnthropicLibError):
    """Error during HTTP transport.

    Raised when:
    - Network connection failure
    - Timeout
    - The connection drops while a stream is being read
    """

    default_kind = "transport_error"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="transport")
        if url:
            ctx.details["url"] = url
        super().__init__(message, ctx)
        self.url = url
        self.__cause__ = cause


class RemoteError(AnthropicLibError):
    """Error response returned by the API.

    Attributes:
        status_code: HTTP status code
        error_class: Standardized error classification
        error_type: Provider error type (e.g. 'overloaded_error')
        retryable: Whether a higher layer may retry
        raw_error: Raw error body
        retry_after: Suggested retry delay in seconds (from header)
        request_id: Request identifier for support
    """

    default_kind = "api_error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        error_class: ErrorClass,
        error_type: str | None = None,
        retryable: bool = False,
        raw_error: dict[str, Any] | None = None,
        retry_after: float | None = None,
        request_id: str | None = None,
    ) -> None:
        ctx = ErrorContext(source="remote")
        ctx.details["status_code"] = status_code
        ctx.details["error_class"] = error_class.value
        if request_id:
            ctx.details["request_id"] = request_id

        super().__init__(message, ctx, kind=error_type)

        self.status_code = status_code
        self.error_class = error_class
        self.error_type = error_type
        self.retryable = retryable
        self.raw_error = raw_error or {}
        self.retry_after = retry_after
        self.request_id = request_id

    @classmethod
    def from_response(
        cls,
        status_code: int,
        body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> RemoteError:
        """Create RemoteError from an HTTP error response.

        Args:
            status_code: HTTP status code
            body: Response body (parsed JSON)
            headers: Response headers

        Returns:
            RemoteError with appropriate classification
        """
        from anthropic_lib_python.errors.classification import (
            classify_http_error,
            extract_error_message,
            extract_error_type,
            is_retryable,
        )

        error_class = classify_http_error(status_code, body)
        message = extract_error_message(body) or f"HTTP {status_code}"

        retry_after = None
        request_id = None
        if headers:
            lowered = {k.lower(): v for k, v in headers.items()}
            retry_after_str = lowered.get("retry-after")
            if retry_after_str:
                with contextlib.suppress(ValueError):
                    retry_after = float(retry_after_str)
            request_id = lowered.get("request-id") or lowered.get("x-request-id")
        if body and isinstance(body.get("request_id"), str):
            request_id = body["request_id"]

        return cls(
            message=message,
            status_code=status_code,
            error_class=error_class,
            error_type=extract_error_type(body),
            retryable=is_retryable(error_class),
            raw_error=body,
            retry_after=retry_after,
            request_id=request_id,
        )


class ParsingError(AnthropicLibError):
    """A single stream event or response body could not be decoded.

    Streams recover from this locally: the error becomes an in-band
    ``StreamError`` event and decoding continues.
    """

    default_kind = "parsing_error"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        payload: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="stream")
        super().__init__(message, ctx)
        self.payload = payload


class ValidationError(AnthropicLibError):
    """Validation error for request parameters."""

    default_kind = "validation_error"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        field: str | None = None,
        actual: Any = None,
    ) -> None:
        ctx = context or ErrorContext(source="validation")
        if field:
            ctx.field_path = field
        if actual is not None:
            ctx.details["actual"] = actual
        super().__init__(message, ctx)
        self.field = field
        self.actual = actual


class BatchTerminalError(AnthropicLibError):
    """A batch reached a failed or expired state with no results to return."""

    def __init__(self, batch_id: str, status: str, message: str | None = None) -> None:
        ctx = ErrorContext(source="batch", details={"batch_id": batch_id, "status": status})
        super().__init__(
            message or f"Batch {batch_id} ended with status '{status}'",
            ctx,
            kind=f"batch_{status}",
        )
        self.batch_id = batch_id
        self.status = status


class NoResultsError(AnthropicLibError):
    """A batch is terminal but exposes no results."""

    default_kind = "no_results"

    def __init__(self, batch_id: str, status: str) -> None:
        ctx = ErrorContext(source="batch", details={"batch_id": batch_id, "status": status})
        super().__init__(f"Batch {batch_id} is {status} but no results are available", ctx)
        self.batch_id = batch_id
        self.status = status


class ToolError(AnthropicLibError):
    """Raised by a tool handler when the tool call cannot be satisfied."""

    default_kind = "tool_error"

    def __init__(self, message: str, *, tool_name: str | None = None) -> None:
        ctx = ErrorContext(source="tool")
        if tool_name:
            ctx.details["tool_name"] = tool_name
        super().__init__(message, ctx)
        self.tool_name = tool_name
