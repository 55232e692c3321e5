"""Tests for type definitions."""

import pydantic
import pytest
from pydantic import TypeAdapter

from anthropic_lib_python.types import (
    ContentBlock,
    ContentBlockDelta,
    InputJsonDelta,
    Message,
    MessageDelta,
    MessageResponse,
    MessageStart,
    MessageStop,
    StreamError,
    StreamEvent,
    TextDelta,
    ToolDefinition,
    ToolResult,
    Usage,
    to_json_object,
)

event_adapter = TypeAdapter(StreamEvent)


class TestUsage:
    """Tests for Usage."""

    def test_merge_replaces_cumulative_counts(self) -> None:
        start = Usage(input_tokens=12, output_tokens=1)
        merged = start.merge(Usage.model_validate({"output_tokens": 5}))

        assert merged.input_tokens == 12
        assert merged.output_tokens == 5

    def test_merge_none(self) -> None:
        usage = Usage(input_tokens=3)
        assert usage.merge(None) is usage

    def test_extra_fields_kept(self) -> None:
        usage = Usage.model_validate({"input_tokens": 1, "service_tier": "standard"})
        assert usage.model_extra == {"service_tier": "standard"}


class TestMessage:
    """Tests for Message."""

    def test_user_text(self) -> None:
        assert Message.user("Hello").to_dict() == {"role": "user", "content": "Hello"}

    def test_blocks_drop_unset_fields(self) -> None:
        msg = Message.assistant([ContentBlock.text_block("Hi")])
        assert msg.to_dict() == {
            "role": "assistant",
            "content": [{"type": "text", "text": "Hi"}],
        }

    def test_tool_result_block(self) -> None:
        block = ContentBlock.tool_result("toolu_1", "42")
        assert block.to_dict() == {
            "type": "tool_result",
            "tool_use_id": "toolu_1",
            "content": "42",
            "is_error": False,
        }


class TestMessageResponse:
    """Tests for MessageResponse."""

    def test_text_and_tool_uses(self) -> None:
        response = MessageResponse.model_validate(
            {
                "id": "msg_1",
                "model": "claude-sonnet-4-5",
                "content": [
                    {"type": "text", "text": "Let me check. "},
                    {"type": "tool_use", "id": "toolu_1", "name": "get_weather", "input": {}},
                    {"type": "text", "text": "Done."},
                ],
                "stop_reason": "tool_use",
                "usage": {"input_tokens": 10, "output_tokens": 20},
            }
        )

        assert response.text == "Let me check. Done."
        assert [b.id for b in response.tool_uses] == ["toolu_1"]
        assert response.usage.output_tokens == 20

    def test_minimal(self) -> None:
        response = MessageResponse.model_validate({"id": "msg_1"})
        assert response.content == []
        assert response.text == ""


class TestStreamEvents:
    """Tests for the StreamEvent union."""

    def test_discriminated_union(self) -> None:
        event = event_adapter.validate_python(
            {
                "type": "content_block_delta",
                "index": 0,
                "delta": {"type": "text_delta", "text": "Hi"},
            }
        )

        assert isinstance(event, ContentBlockDelta)
        assert isinstance(event.delta, TextDelta)
        assert event.text == "Hi"

    def test_non_text_delta_has_no_text(self) -> None:
        event = ContentBlockDelta(index=1, delta=InputJsonDelta(partial_json='{"a"'))
        assert event.text is None

    def test_unknown_delta_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            event_adapter.validate_python(
                {"type": "content_block_delta", "index": 0, "delta": {"type": "mystery"}}
            )

    def test_events_are_frozen(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            MessageStop().type = "other"  # type: ignore[misc]

    def test_message_start_from_wire(self) -> None:
        event = MessageStart.from_wire(
            {
                "type": "message_start",
                "message": {
                    "id": "msg_1",
                    "model": "claude-sonnet-4-5",
                    "usage": {"input_tokens": 7, "output_tokens": 1},
                },
            }
        )

        assert event.message_id == "msg_1"
        assert event.initial_usage.input_tokens == 7
        assert event.role == "assistant"

    def test_message_start_requires_id(self) -> None:
        with pytest.raises(KeyError):
            MessageStart.from_wire({"type": "message_start", "message": {}})

    def test_message_delta_from_wire(self) -> None:
        event = MessageDelta.from_wire(
            {"type": "message_delta", "delta": {"stop_reason": "max_tokens"}}
        )

        assert event.stop_reason == "max_tokens"
        assert event.usage is None

    def test_terminal_flags(self) -> None:
        assert MessageStop().is_terminal
        assert not MessageDelta().is_terminal

        parsing = StreamError(kind="parsing_error", message="bad")
        assert parsing.recoverable
        assert not parsing.is_terminal

        overloaded = StreamError(kind="overloaded_error", message="busy")
        assert not overloaded.recoverable
        assert overloaded.is_terminal


class TestToolTypes:
    """Tests for tool types."""

    def test_definition_name_pattern(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ToolDefinition(name="has spaces")

    def test_result_from_output(self) -> None:
        assert ToolResult.from_output("t1", {"a": [1, 2]}).content == '{"a": [1, 2]}'
        assert ToolResult.from_output("t1", "plain").content == "plain"

    def test_error_result(self) -> None:
        result = ToolResult.error("t1", "boom")
        assert result.is_error
        assert result.to_content_block()["is_error"] is True

    def test_to_json_object(self) -> None:
        assert to_json_object({"a": {"b": None}}) == {"a": {"b": None}}
        with pytest.raises(pydantic.ValidationError):
            to_json_object(["not", "an", "object"])
