"""事件映射：将 SSE 帧转换为类型化的流事件。

Event mapper converting SSE frames to typed stream events.

A frame that cannot be decoded becomes an in-band ``parsing_error`` event
instead of an exception, so one malformed event never aborts the stream.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pydantic

from anthropic_lib_python.pipeline.base import EventMapper
from anthropic_lib_python.telemetry import get_logger
from anthropic_lib_python.types.events import (
    PARSING_ERROR,
    ContentBlockDelta,
    ContentBlockStart,
    ContentBlockStop,
    MessageDelta,
    MessageStart,
    MessageStop,
    StreamError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from anthropic_lib_python.pipeline.decode import SSEFrame
    from anthropic_lib_python.types.events import StreamEvent

logger = get_logger("anthropic_lib_python.pipeline")

PAYLOAD_PREVIEW_CHARS = 200

_BUILDERS: dict[str, Callable[[dict[str, Any]], StreamEvent]] = {
    "message_start": MessageStart.from_wire,
    "content_block_start": ContentBlockStart.model_validate,
    "content_block_delta": ContentBlockDelta.model_validate,
    "content_block_stop": ContentBlockStop.model_validate,
    "message_delta": MessageDelta.from_wire,
    "message_stop": MessageStop.model_validate,
}


def _parsing_error(message: str, data: str) -> StreamError:
    preview = data[:PAYLOAD_PREVIEW_CHARS]
    logger.warning("Failed to parse stream event", error=message, payload=preview)
    return StreamError(kind=PARSING_ERROR, message=f"{message}: {preview}", payload=data)


class ApiEventMapper(EventMapper):
    """Maps Messages API stream frames to ``StreamEvent`` models.

    Dispatches on the payload's ``type`` field, falling back to the SSE
    ``event`` name. ``ping`` frames are dropped.

    Example:
        >>> mapper = ApiEventMapper()
        >>> event = mapper.map_frame(SSEFrame("message_stop", '{"type": "message_stop"}'))
    """

    def map_frame(self, frame: SSEFrame) -> StreamEvent | None:
        """Map a single frame.

        Returns:
            The event, or None for frames that carry no event (pings)
        """
        try:
            payload = json.loads(frame.data)
        except json.JSONDecodeError as e:
            return _parsing_error(f"Invalid JSON in stream event ({e.msg})", frame.data)

        if not isinstance(payload, dict):
            return _parsing_error("Stream event is not a JSON object", frame.data)

        event_type = payload.get("type") or frame.event

        if event_type == "ping":
            logger.debug("Received ping")
            return None

        if event_type == "error":
            error = payload.get("error")
            if not isinstance(error, dict):
                error = {}
            return StreamError(
                kind=str(error.get("type") or "api_error"),
                message=str(error.get("message") or "Unknown stream error"),
            )

        builder = _BUILDERS.get(str(event_type))
        if builder is None:
            return _parsing_error(f"Unknown stream event type '{event_type}'", frame.data)

        try:
            return builder(payload)
        except (pydantic.ValidationError, KeyError, TypeError, AttributeError) as e:
            return _parsing_error(f"Malformed '{event_type}' event ({e})", frame.data)

    async def map_events(self, frames: AsyncIterator[SSEFrame]) -> AsyncIterator[StreamEvent]:
        async for frame in frames:
            event = self.map_frame(frame)
            if event is not None:
                yield event
