"""
Messages resource: ``POST /v1/messages``, plain and streaming.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pydantic

from anthropic_lib_python.errors import ParsingError, ValidationError
from anthropic_lib_python.pipeline.stream import MessageStream, StreamDecoder
from anthropic_lib_python.telemetry import get_logger
from anthropic_lib_python.transport.base import RequestDescriptor
from anthropic_lib_python.types.message import ContentBlock, Message, MessageResponse
from anthropic_lib_python.types.tool import ToolDefinition

if TYPE_CHECKING:
    from anthropic_lib_python.transport.base import Transport

logger = get_logger("anthropic_lib_python.client")

MESSAGES_PATH = "/v1/messages"


def _serialize(value: Any) -> Any:
    if isinstance(value, (Message, ContentBlock, ToolDefinition)):
        return value.to_dict()
    if isinstance(value, pydantic.BaseModel):
        return value.model_dump(exclude_none=True)
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    return value


def build_payload(params: dict[str, Any], *, stream: bool = False) -> dict[str, Any]:
    """Build a request body from message creation parameters.

    ``Message``, ``ContentBlock`` and ``ToolDefinition`` values are
    converted to their wire shape. Unset (None) parameters are dropped.
    """
    payload = {k: _serialize(v) for k, v in params.items() if v is not None}
    if stream:
        payload["stream"] = True
    else:
        payload.pop("stream", None)
    return payload


def _check_unit_range(payload: dict[str, Any], name: str) -> None:
    value = payload.get(name)
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
        raise ValidationError(f"{name} must be between 0.0 and 1.0", field=name, actual=value)


def validate_payload(payload: dict[str, Any]) -> None:
    """Check a request body before it is sent.

    Raises:
        ValidationError: With ``field`` naming the offending parameter
    """
    if not payload.get("model"):
        raise ValidationError("model is required", field="model")

    max_tokens = payload.get("max_tokens")
    if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens < 1:
        raise ValidationError(
            "max_tokens must be a positive integer", field="max_tokens", actual=max_tokens
        )

    if not payload.get("messages"):
        raise ValidationError("messages cannot be empty", field="messages")

    _check_unit_range(payload, "temperature")
    _check_unit_range(payload, "top_p")

    top_k = payload.get("top_k")
    if top_k is not None and (isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 1):
        raise ValidationError("top_k must be a positive integer", field="top_k", actual=top_k)

    tool_names: list[str | None] = []
    for i, tool in enumerate(payload.get("tools") or []):
        name = tool.get("name") if isinstance(tool, dict) else None
        if name in tool_names:
            raise ValidationError(
                "Tool names must be unique", field=f"tools[{i}].name", actual=name
            )
        tool_names.append(name)

    tool_choice = payload.get("tool_choice")
    if isinstance(tool_choice, dict) and tool_choice.get("type") == "tool":
        name = tool_choice.get("name")
        if name not in tool_names:
            raise ValidationError(
                f"tool_choice references unknown tool: {name}",
                field="tool_choice.name",
                actual=name,
            )


class Messages:
    """Messages API operations.

    Example:
        >>> response = await client.messages.create(
        ...     model="claude-sonnet-4-5",
        ...     max_tokens=1024,
        ...     messages=[Message.user("Hello")],
        ... )
        >>> print(response.text)
    """

    def __init__(self, transport: Transport, decoder: StreamDecoder | None = None) -> None:
        self._transport = transport
        self._decoder = decoder or StreamDecoder()

    async def create(self, **params: Any) -> MessageResponse:
        """Create a message and wait for the complete response.

        Raises:
            ValidationError: If the parameters are rejected before sending
        """
        payload = build_payload(params)
        validate_payload(payload)
        request = RequestDescriptor.post(MESSAGES_PATH, payload)
        logger.debug("Creating message", model=params.get("model"))
        response = await self._transport.send(request)
        try:
            return MessageResponse.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            raise ParsingError(
                f"Malformed message response: {e}", payload=response.text[:200]
            ) from e

    def stream(self, **params: Any) -> MessageStream:
        """Create a message and stream it.

        Parameters are validated immediately; nothing is sent until the
        returned stream is iterated.
        """
        payload = build_payload(params, stream=True)
        validate_payload(payload)
        request = RequestDescriptor.post(MESSAGES_PATH, payload)
        logger.debug("Streaming message", model=params.get("model"))
        return MessageStream(self._decoder.decode(self._transport.stream(request)))
