"""
Accumulator for stateful stream processing.

Folds the events of one message stream back into a complete message:
text and thinking deltas are concatenated per content block, and tool
input arrives as partial JSON strings that are only parsed once the
block closes:
- Delta 1: {"partial_json": '{"city":'}
- Delta 2: {"partial_json": ' "Tokyo"'}
- Delta 3: {"partial_json": '}'}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any

from anthropic_lib_python.telemetry import get_logger
from anthropic_lib_python.types.events import (
    ContentBlockDelta,
    ContentBlockStart,
    ContentBlockStop,
    InputJsonDelta,
    MessageDelta,
    MessageStart,
    MessageStop,
    SignatureDelta,
    StreamError,
    TextDelta,
    ThinkingDelta,
)
from anthropic_lib_python.types.message import ContentBlock, MessageResponse, Usage

logger = get_logger("anthropic_lib_python.pipeline")


@dataclass
class _BlockState:
    type: str
    text: str = ""
    thinking: str = ""
    signature: str = ""
    id: str | None = None
    name: str | None = None
    partial_json: str = ""
    closed: bool = False

    def to_content_block(self) -> ContentBlock:
        if self.type == "tool_use":
            tool_input: dict[str, Any] = {}
            if self.partial_json:
                try:
                    parsed = json.loads(self.partial_json)
                    if isinstance(parsed, dict):
                        tool_input = parsed
                except json.JSONDecodeError:
                    logger.warning("Incomplete tool input JSON", tool=self.name)
            return ContentBlock(type="tool_use", id=self.id, name=self.name, input=tool_input)
        if self.type == "thinking":
            return ContentBlock(
                type="thinking", thinking=self.thinking, signature=self.signature or None
            )
        return ContentBlock(type=self.type, text=self.text)


@dataclass
class AccumulatedMessage:
    """A message rebuilt from stream events.

    Attributes:
        id: Message id from ``message_start``
        model: Model that produced the message
        content: Content blocks, ordered by index
        stop_reason: Final stop reason
        stop_sequence: Stop sequence that ended generation, if any
        usage: Usage merged across ``message_start`` and ``message_delta``
        errors: Error events seen during the stream
        complete: Whether ``message_stop`` was received
    """

    id: str | None = None
    model: str | None = None
    content: list[ContentBlock] = field(default_factory=list)
    stop_reason: str | None = None
    stop_sequence: str | None = None
    usage: Usage = field(default_factory=Usage)
    errors: list[StreamError] = field(default_factory=list)
    complete: bool = False

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""
        return "".join(b.text or "" for b in self.content if b.type == "text")

    @property
    def tool_uses(self) -> list[ContentBlock]:
        return [b for b in self.content if b.type == "tool_use"]

    def to_response(self) -> MessageResponse:
        """Convert to the non-streaming response model."""
        return MessageResponse(
            id=self.id or "",
            model=self.model,
            content=list(self.content),
            stop_reason=self.stop_reason,
            stop_sequence=self.stop_sequence,
            usage=self.usage,
        )


class MessageAccumulator:
    """Accumulates stream events into an ``AccumulatedMessage``.

    Example:
        >>> acc = MessageAccumulator()
        >>> async for event in stream:
        ...     acc.add(event)
        >>> print(acc.message.text)
    """

    def __init__(self) -> None:
        self._message = AccumulatedMessage()
        self._blocks: dict[int, _BlockState] = {}

    def add(self, event: Any) -> None:
        """Fold one event into the message."""
        msg = self._message

        if isinstance(event, MessageStart):
            msg.id = event.message_id
            msg.model = event.model
            msg.usage = msg.usage.merge(event.initial_usage)
        elif isinstance(event, ContentBlockStart):
            block = event.content_block
            self._blocks[event.index] = _BlockState(
                type=block.type,
                text=block.text or "",
                thinking=block.thinking or "",
                id=block.id,
                name=block.name,
            )
        elif isinstance(event, ContentBlockDelta):
            state = self._blocks.setdefault(event.index, _BlockState(type="text"))
            delta = event.delta
            if isinstance(delta, TextDelta):
                state.text += delta.text
            elif isinstance(delta, ThinkingDelta):
                state.thinking += delta.thinking
            elif isinstance(delta, InputJsonDelta):
                state.partial_json += delta.partial_json
            elif isinstance(delta, SignatureDelta):
                state.signature += delta.signature
        elif isinstance(event, ContentBlockStop):
            if event.index in self._blocks:
                self._blocks[event.index].closed = True
        elif isinstance(event, MessageDelta):
            if event.stop_reason is not None:
                msg.stop_reason = event.stop_reason
            if event.stop_sequence is not None:
                msg.stop_sequence = event.stop_sequence
            msg.usage = msg.usage.merge(event.usage)
        elif isinstance(event, MessageStop):
            msg.complete = True
        elif isinstance(event, StreamError):
            msg.errors.append(event)

    @property
    def message(self) -> AccumulatedMessage:
        """Snapshot of the message so far.

        Each access returns a new object; later events do not change it.
        """
        return replace(
            self._message,
            content=[self._blocks[index].to_content_block() for index in sorted(self._blocks)],
            errors=list(self._message.errors),
        )
