"""
Message types for the Messages API.

Provides the request-side ``Message`` and the response-side
``MessageResponse`` with its content blocks and token usage.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    """Message role enumeration."""

    USER = "user"
    ASSISTANT = "assistant"


class Usage(BaseModel):
    """Token usage reported by the API."""

    model_config = ConfigDict(extra="allow")

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int | None = None
    cache_read_input_tokens: int | None = None

    def merge(self, other: Usage | None) -> Usage:
        """Overlay counts from a later usage report.

        ``message_delta`` events carry cumulative output counts, so values
        are replaced rather than summed. Only fields the later report
        actually set are applied.
        """
        if other is None:
            return self
        return self.model_copy(update=other.model_dump(exclude_unset=True, exclude_none=True))


class ContentBlock(BaseModel):
    """A content block in a message (text, thinking, tool_use, tool_result)."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(description="Block type")
    text: str | None = None
    thinking: str | None = None
    signature: str | None = None
    id: str | None = None
    name: str | None = None
    input: dict[str, Any] | None = None
    tool_use_id: str | None = None
    content: Any = None
    is_error: bool | None = None

    @classmethod
    def text_block(cls, text: str) -> ContentBlock:
        return cls(type="text", text=text)

    @classmethod
    def tool_result(cls, tool_use_id: str, content: str, is_error: bool = False) -> ContentBlock:
        return cls(type="tool_result", tool_use_id=tool_use_id, content=content, is_error=is_error)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the API wire shape."""
        return self.model_dump(exclude_none=True)


class Message(BaseModel):
    """A conversation message.

    Example:
        >>> Message.user("Hello")
        >>> Message(role=MessageRole.ASSISTANT, content=[ContentBlock.text_block("Hi")])
    """

    role: MessageRole
    content: str | list[ContentBlock]

    @classmethod
    def user(cls, content: str | list[ContentBlock]) -> Message:
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str | list[ContentBlock]) -> Message:
        return cls(role=MessageRole.ASSISTANT, content=content)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the API wire shape."""
        if isinstance(self.content, str):
            return {"role": self.role.value, "content": self.content}
        return {"role": self.role.value, "content": [b.to_dict() for b in self.content]}


class MessageResponse(BaseModel):
    """Response body of ``POST /v1/messages``."""

    model_config = ConfigDict(extra="allow")

    id: str
    type: str = "message"
    role: str = "assistant"
    model: str | None = None
    content: list[ContentBlock] = Field(default_factory=list)
    stop_reason: str | None = None
    stop_sequence: str | None = None
    usage: Usage = Field(default_factory=Usage)

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""
        return "".join(b.text or "" for b in self.content if b.type == "text")

    @property
    def tool_uses(self) -> list[ContentBlock]:
        """Tool-use blocks requested by the model."""
        return [b for b in self.content if b.type == "tool_use"]
