"""Tests for telemetry module."""

import io
import json
import logging

import pytest

from anthropic_lib_python.telemetry import (
    JsonFormatter,
    LibLogger,
    LogContext,
    LogLevel,
    SensitiveDataMasker,
    TextFormatter,
    clear_log_context,
    get_log_context,
    get_logger,
    set_log_context,
)


def make_record(msg: str, **fields) -> logging.LogRecord:
    record = logging.LogRecord(
        "anthropic_lib_python.test", logging.INFO, __file__, 1, msg, None, None
    )
    if fields:
        record.extra_fields = fields
    return record


@pytest.fixture(autouse=True)
def _reset_context():
    clear_log_context()
    yield
    clear_log_context()


class TestLogContext:
    """Tests for LogContext."""

    def test_empty_context(self) -> None:
        assert LogContext().to_dict() == {}

    def test_context_with_fields(self) -> None:
        """Test context with fields."""
        ctx = LogContext(request_id="req-123", batch_id="msgbatch_1", extra={"chunk": 2})
        assert ctx.to_dict() == {"request_id": "req-123", "batch_id": "msgbatch_1", "chunk": 2}

    def test_with_extra(self) -> None:
        ctx = LogContext(model="claude-sonnet-4-5").with_extra(turn=1)
        assert ctx.to_dict() == {"model": "claude-sonnet-4-5", "turn": 1}

    def test_set_and_get(self) -> None:
        set_log_context(LogContext(batch_id="msgbatch_1", extra={"chunk": 0}))

        ctx = get_log_context()
        assert ctx.batch_id == "msgbatch_1"
        assert ctx.extra == {"chunk": 0}

        clear_log_context()
        assert get_log_context().to_dict() == {}


class TestSensitiveDataMasker:
    """Tests for SensitiveDataMasker."""

    def test_masks_api_key(self) -> None:
        masker = SensitiveDataMasker()
        masked = masker.mask("using key sk-ant-api03-abcdefghijkl")

        assert "abcdefghijkl" not in masked
        assert "sk-ant-***REDACTED***" in masked

    def test_masks_header(self) -> None:
        masked = SensitiveDataMasker().mask("x-api-key: secret-value")
        assert "secret-value" not in masked

    def test_leaves_plain_text(self) -> None:
        assert SensitiveDataMasker().mask("Batch polled") == "Batch polled"

    def test_mask_dict(self) -> None:
        masked = SensitiveDataMasker().mask_dict(
            {
                "api_key": "anything",
                "batch_id": "msgbatch_1",
                "nested": {"auth_token": "t", "note": "sk-ant-api03-abcdefghijkl"},
                "count": 3,
            }
        )

        assert masked["api_key"] == "***REDACTED***"
        assert masked["batch_id"] == "msgbatch_1"
        assert masked["nested"]["auth_token"] == "***REDACTED***"
        assert "abcdefghijkl" not in masked["nested"]["note"]
        assert masked["count"] == 3


class TestFormatters:
    """Tests for log formatters."""

    def test_json_formatter(self) -> None:
        set_log_context(LogContext(batch_id="msgbatch_1"))
        output = JsonFormatter().format(make_record("Batch polled", status="in_progress"))

        data = json.loads(output)
        assert data["level"] == "INFO"
        assert data["message"] == "Batch polled"
        assert data["status"] == "in_progress"
        assert data["context"] == {"batch_id": "msgbatch_1"}
        assert data["timestamp"].endswith("Z")

    def test_json_formatter_masks(self) -> None:
        output = JsonFormatter().format(make_record("key sk-ant-api03-abcdefghijkl", api_key="x"))

        data = json.loads(output)
        assert "abcdefghijkl" not in data["message"]
        assert data["api_key"] == "***REDACTED***"

    def test_text_formatter_appends_fields(self) -> None:
        output = TextFormatter().format(make_record("Running tool", tool="get_weather", turn=1))

        assert "| INFO     |" in output
        assert output.endswith("| tool=get_weather turn=1")


class TestLibLogger:
    """Tests for LibLogger."""

    def test_get_logger_cached(self) -> None:
        a = get_logger("anthropic_lib_python.test_cache")
        b = get_logger("anthropic_lib_python.test_cache")
        assert a._logger is b._logger

    def test_fields_reach_records(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("anthropic_lib_python.test_fields")
        with caplog.at_level(logging.WARNING, logger="anthropic_lib_python.test_fields"):
            logger.warning("Tool loop stopped", max_turns=3)

        record = caplog.records[-1]
        assert record.getMessage() == "Tool loop stopped"
        assert record.extra_fields == {"max_turns": 3}

    def test_configure_json(self) -> None:
        stream = io.StringIO()
        logger = get_logger("anthropic_lib_python.test_configure")
        try:
            LibLogger.configure(level=LogLevel.DEBUG, format="json", stream=stream)
            logger.debug("Creating message", model="claude-sonnet-4-5")
        finally:
            LibLogger._handler = None
            LibLogger._level = LogLevel.WARNING
            for registered in LibLogger._loggers.values():
                registered.handlers.clear()
                registered.setLevel(logging.WARNING)

        data = json.loads(stream.getvalue().strip())
        assert data["message"] == "Creating message"
        assert data["model"] == "claude-sonnet-4-5"

    def test_level_conversion(self) -> None:
        assert LogLevel.ERROR.to_logging_level() == logging.ERROR
