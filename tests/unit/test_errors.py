"""Tests for error module."""

import pytest

from anthropic_lib_python.errors import (
    AnthropicLibError,
    BatchTerminalError,
    ErrorClass,
    ErrorContext,
    NoResultsError,
    ParsingError,
    RemoteError,
    ToolError,
    TransportError,
    ValidationError,
    classify_http_error,
    extract_error_message,
    extract_error_type,
    is_retryable,
)


class TestErrorContext:
    """Tests for ErrorContext."""

    def test_empty_context(self) -> None:
        assert str(ErrorContext()) == ""

    def test_context_with_source(self) -> None:
        """Test context with source."""
        ctx = ErrorContext(source="batch")
        assert "[batch]" in str(ctx)

    def test_context_with_field_path(self) -> None:
        ctx = ErrorContext(field_path="requests[3].custom_id")
        assert "at 'requests[3].custom_id'" in str(ctx)

    def test_context_with_hint(self) -> None:
        ctx = ErrorContext(hint="Check your API key")
        assert "(hint: Check your API key)" in str(ctx)


class TestAnthropicLibError:
    """Tests for base error class."""

    def test_basic_error(self) -> None:
        """Test basic error creation."""
        error = AnthropicLibError("Something went wrong")
        assert error.message == "Something went wrong"
        assert str(error) == "Something went wrong"
        assert error.kind == "error"

    def test_error_with_context(self) -> None:
        ctx = ErrorContext(source="test", hint="Try again")
        error = AnthropicLibError("Failed", ctx)
        assert "[test]" in str(error)
        assert "(hint: Try again)" in str(error)

    def test_explicit_kind(self) -> None:
        assert AnthropicLibError("x", kind="custom").kind == "custom"

    def test_with_hint(self) -> None:
        error = AnthropicLibError("Failed").with_hint("Check the config")
        assert error.context.hint == "Check the config"


class TestErrorKinds:
    """Tests for the kind carried by each error type."""

    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (TransportError("down"), "transport_error"),
            (ParsingError("bad json"), "parsing_error"),
            (ValidationError("bad"), "validation_error"),
            (NoResultsError("msgbatch_1", "canceled"), "no_results"),
            (ToolError("nope"), "tool_error"),
            (BatchTerminalError("msgbatch_1", "expired"), "batch_expired"),
            (BatchTerminalError("msgbatch_1", "failed"), "batch_failed"),
        ],
    )
    def test_kind(self, error: AnthropicLibError, kind: str) -> None:
        assert error.kind == kind

    def test_transport_error_records_url_and_cause(self) -> None:
        cause = OSError("reset")
        error = TransportError("Connection failed", url="https://x/v1", cause=cause)

        assert error.url == "https://x/v1"
        assert error.__cause__ is cause
        assert error.context.details["url"] == "https://x/v1"

    def test_validation_error_field(self) -> None:
        error = ValidationError("Duplicate custom_id", field="requests[1].custom_id", actual="a")
        assert error.context.field_path == "requests[1].custom_id"
        assert error.context.details["actual"] == "a"

    def test_batch_terminal_error_details(self) -> None:
        error = BatchTerminalError("msgbatch_1", "failed")
        assert error.batch_id == "msgbatch_1"
        assert "msgbatch_1" in error.message
        assert error.context.details == {"batch_id": "msgbatch_1", "status": "failed"}

    def test_parsing_error_payload(self) -> None:
        assert ParsingError("bad", payload="{oops").payload == "{oops"


class TestRemoteError:
    """Tests for RemoteError.from_response."""

    def test_anthropic_envelope(self) -> None:
        body = {
            "type": "error",
            "error": {"type": "overloaded_error", "message": "Overloaded"},
        }
        error = RemoteError.from_response(529, body)

        assert error.message == "Overloaded"
        assert error.kind == "overloaded_error"
        assert error.error_type == "overloaded_error"
        assert error.error_class == ErrorClass.OVERLOADED
        assert error.retryable
        assert error.raw_error == body

    def test_no_body(self) -> None:
        error = RemoteError.from_response(500)

        assert error.message == "HTTP 500"
        assert error.kind == "api_error"
        assert error.error_class == ErrorClass.SERVER_ERROR

    def test_headers_case_insensitive(self) -> None:
        error = RemoteError.from_response(429, None, {"Retry-After": "3", "X-Request-Id": "r1"})

        assert error.retry_after == 3.0
        assert error.request_id == "r1"

    def test_bad_retry_after_ignored(self) -> None:
        error = RemoteError.from_response(429, None, {"retry-after": "soon"})
        assert error.retry_after is None

    def test_request_id_from_body(self) -> None:
        error = RemoteError.from_response(404, {"request_id": "req_body"}, {"request-id": "h"})
        assert error.request_id == "req_body"

    def test_not_retryable(self) -> None:
        body = {"error": {"type": "invalid_request_error", "message": "max_tokens missing"}}
        error = RemoteError.from_response(400, body)

        assert not error.retryable
        assert error.error_class == ErrorClass.INVALID_REQUEST


class TestClassification:
    """Tests for HTTP error classification."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (400, ErrorClass.INVALID_REQUEST),
            (401, ErrorClass.AUTHENTICATION),
            (403, ErrorClass.PERMISSION_DENIED),
            (404, ErrorClass.NOT_FOUND),
            (413, ErrorClass.REQUEST_TOO_LARGE),
            (429, ErrorClass.RATE_LIMITED),
            (500, ErrorClass.SERVER_ERROR),
            (503, ErrorClass.OVERLOADED),
            (504, ErrorClass.TIMEOUT),
            (529, ErrorClass.OVERLOADED),
            (418, ErrorClass.INVALID_REQUEST),
            (599, ErrorClass.SERVER_ERROR),
            (302, ErrorClass.OTHER),
        ],
    )
    def test_status_mapping(self, status: int, expected: ErrorClass) -> None:
        assert classify_http_error(status) == expected

    def test_body_type_wins(self) -> None:
        body = {"error": {"type": "request_too_large"}}
        assert classify_http_error(400, body) == ErrorClass.REQUEST_TOO_LARGE

    def test_unknown_body_type_falls_back_to_status(self) -> None:
        body = {"error": {"type": "brand_new_error"}}
        assert classify_http_error(429, body) == ErrorClass.RATE_LIMITED

    def test_retryable_classes(self) -> None:
        assert is_retryable(ErrorClass.RATE_LIMITED)
        assert is_retryable(ErrorClass.OVERLOADED)
        assert not is_retryable(ErrorClass.AUTHENTICATION)
        assert not is_retryable(ErrorClass.NOT_FOUND)


class TestExtraction:
    """Tests for error body extraction helpers."""

    def test_extract_type(self) -> None:
        assert extract_error_type({"error": {"type": "api_error"}}) == "api_error"
        assert extract_error_type({"error": "plain"}) is None
        assert extract_error_type(None) is None

    @pytest.mark.parametrize(
        ("body", "expected"),
        [
            ({"error": {"message": "nested"}}, "nested"),
            ({"error": "flat"}, "flat"),
            ({"message": "top"}, "top"),
            ({"detail": "why"}, "why"),
            ({"detail": ["first", "second"]}, "first"),
            ({}, None),
        ],
    )
    def test_extract_message(self, body: dict, expected: str | None) -> None:
        assert extract_error_message(body) == expected
