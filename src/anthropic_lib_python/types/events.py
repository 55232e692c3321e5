"""
Streaming events for the Messages API.

Every server-sent event of a message stream is decoded into one of the
models below. ``StreamEvent`` is the discriminated union of all of them.

Ordering within one stream:
    MessageStart
      (ContentBlockStart  ContentBlockDelta*  ContentBlockStop)*
      MessageDelta*
    MessageStop

A ``StreamError`` may appear anywhere. Only ``parsing_error`` is
recoverable; any other kind ends the stream.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from anthropic_lib_python.types.message import ContentBlock, Usage

PARSING_ERROR = "parsing_error"
UNEXPECTED_END_OF_STREAM = "unexpected_end_of_stream"

RECOVERABLE_ERROR_KINDS: frozenset[str] = frozenset({PARSING_ERROR})


class TextDelta(BaseModel):
    """Incremental text for a text block."""

    type: Literal["text_delta"] = "text_delta"
    text: str


class ThinkingDelta(BaseModel):
    """Incremental reasoning text for a thinking block."""

    type: Literal["thinking_delta"] = "thinking_delta"
    thinking: str


class InputJsonDelta(BaseModel):
    """Partial JSON of a tool_use block's input."""

    type: Literal["input_json_delta"] = "input_json_delta"
    partial_json: str


class SignatureDelta(BaseModel):
    """Signature closing a thinking block."""

    type: Literal["signature_delta"] = "signature_delta"
    signature: str


Delta = Annotated[
    Union[TextDelta, ThinkingDelta, InputJsonDelta, SignatureDelta],
    Field(discriminator="type"),
]


class _Event(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @property
    def is_terminal(self) -> bool:
        """Whether no further events may follow this one."""
        return False


class MessageStart(_Event):
    """First event of every stream."""

    type: Literal["message_start"] = "message_start"
    message_id: str
    initial_usage: Usage = Field(default_factory=Usage)
    model: str | None = None
    role: str = "assistant"

    @classmethod
    def from_wire(cls, payload: dict[str, Any]) -> MessageStart:
        """Build from ``{"type": "message_start", "message": {...}}``."""
        message = payload.get("message") or {}
        return cls(
            message_id=message["id"],
            initial_usage=Usage.model_validate(message.get("usage") or {}),
            model=message.get("model"),
            role=message.get("role", "assistant"),
        )


class ContentBlockStart(_Event):
    """Opens the content block at ``index``."""

    type: Literal["content_block_start"] = "content_block_start"
    index: int
    content_block: ContentBlock = Field(default_factory=lambda: ContentBlock(type="text"))


class ContentBlockDelta(_Event):
    """Incremental content for the block at ``index``."""

    type: Literal["content_block_delta"] = "content_block_delta"
    index: int
    delta: Delta

    @property
    def text(self) -> str | None:
        """Text carried by a text delta, else None."""
        return self.delta.text if isinstance(self.delta, TextDelta) else None


class ContentBlockStop(_Event):
    """Closes the content block at ``index``."""

    type: Literal["content_block_stop"] = "content_block_stop"
    index: int


class MessageDelta(_Event):
    """Top-level message changes (stop reason, cumulative usage)."""

    type: Literal["message_delta"] = "message_delta"
    stop_reason: str | None = None
    stop_sequence: str | None = None
    usage: Usage | None = None

    @classmethod
    def from_wire(cls, payload: dict[str, Any]) -> MessageDelta:
        """Build from ``{"type": "message_delta", "delta": {...}, "usage": {...}}``."""
        delta = payload.get("delta") or {}
        usage = payload.get("usage")
        return cls(
            stop_reason=delta.get("stop_reason"),
            stop_sequence=delta.get("stop_sequence"),
            usage=Usage.model_validate(usage) if usage is not None else None,
        )


class MessageStop(_Event):
    """Last event of a complete stream."""

    type: Literal["message_stop"] = "message_stop"

    @property
    def is_terminal(self) -> bool:
        return True


class StreamError(_Event):
    """In-band error event.

    Attributes:
        kind: Error kind ('parsing_error', 'overloaded_error', 'transport_error', ...)
        message: Human-readable description
        payload: Offending raw event data, for parsing errors
    """

    type: Literal["error"] = "error"
    kind: str
    message: str
    payload: str | None = None

    @property
    def recoverable(self) -> bool:
        return self.kind in RECOVERABLE_ERROR_KINDS

    @property
    def is_terminal(self) -> bool:
        return not self.recoverable


StreamEvent = Annotated[
    Union[
        MessageStart,
        ContentBlockStart,
        ContentBlockDelta,
        ContentBlockStop,
        MessageDelta,
        MessageStop,
        StreamError,
    ],
    Field(discriminator="type"),
]
