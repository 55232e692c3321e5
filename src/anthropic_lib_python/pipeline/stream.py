"""流解码器：将 SSE 字节流转换为有序、惰性的类型化事件序列。

Stream decoder for Messages API event streams.

Turns the raw chunk stream of a streaming request into a lazy, ordered
sequence of ``StreamEvent`` values. A stream always ends, either with
``MessageStop`` or with a terminal ``StreamError``:

- malformed events become ``parsing_error`` events and decoding continues
- the source ending before ``message_stop`` yields ``unexpected_end_of_stream``
- a transport or API error raised by the source becomes a terminal error event
- a server ``error`` event ends the stream after it is emitted
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from anthropic_lib_python.errors import AnthropicLibError
from anthropic_lib_python.pipeline.accumulate import AccumulatedMessage, MessageAccumulator
from anthropic_lib_python.pipeline.decode import SSEFrameDecoder
from anthropic_lib_python.pipeline.event_map import ApiEventMapper
from anthropic_lib_python.telemetry import get_logger
from anthropic_lib_python.types.events import (
    UNEXPECTED_END_OF_STREAM,
    ContentBlockDelta,
    ContentBlockStart,
    ContentBlockStop,
    MessageStart,
    StreamError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from anthropic_lib_python.pipeline.base import EventMapper, FrameDecoder
    from anthropic_lib_python.types.events import StreamEvent

logger = get_logger("anthropic_lib_python.pipeline")


async def _aclose(iterator: Any) -> None:
    aclose = getattr(iterator, "aclose", None)
    if aclose is not None:
        await aclose()


class _OrderTracker:
    """Checks block ordering. Violations are logged, never dropped."""

    def __init__(self) -> None:
        self._started = False
        self._open: set[int] = set()

    def observe(self, event: StreamEvent) -> None:
        if isinstance(event, MessageStart):
            self._started = True
            return
        if isinstance(event, StreamError):
            return
        if not self._started:
            logger.warning("Stream event before message_start", event_type=event.type)
        if isinstance(event, ContentBlockStart):
            if event.index in self._open:
                logger.warning("Content block started twice", index=event.index)
            self._open.add(event.index)
        elif isinstance(event, (ContentBlockDelta, ContentBlockStop)):
            if event.index not in self._open:
                logger.warning(
                    "Content block event without open block",
                    event_type=event.type,
                    index=event.index,
                )
            if isinstance(event, ContentBlockStop):
                self._open.discard(event.index)


class StreamDecoder:
    """Decodes a chunk stream into stream events.

    Example:
        >>> decoder = StreamDecoder()
        >>> async for event in decoder.decode(transport.stream(request)):
        ...     if isinstance(event, ContentBlockDelta) and event.text:
        ...         print(event.text, end="")

    Closing the generator returned by ``decode`` (``aclose()``, or breaking
    out of an ``async with MessageStream(...)`` block) discards buffered
    data and closes the chunk source.
    """

    def __init__(
        self,
        frame_decoder: FrameDecoder | None = None,
        event_mapper: EventMapper | None = None,
    ) -> None:
        self._frame_decoder = frame_decoder or SSEFrameDecoder()
        self._event_mapper = event_mapper or ApiEventMapper()

    async def decode(self, chunks: AsyncIterator[bytes | str]) -> AsyncIterator[StreamEvent]:
        """Decode ``chunks`` into events.

        Args:
            chunks: Raw chunks in arrival order

        Yields:
            Stream events in input order
        """
        frames = self._frame_decoder.decode(chunks)
        events = self._event_mapper.map_events(frames)
        tracker = _OrderTracker()

        try:
            try:
                async for event in events:
                    tracker.observe(event)
                    yield event
                    if event.is_terminal:
                        return
            except AnthropicLibError as e:
                logger.warning("Stream aborted by source error", kind=e.kind, error=e.message)
                yield StreamError(kind=e.kind, message=e.message)
                return

            logger.warning("Stream ended before message_stop")
            yield StreamError(
                kind=UNEXPECTED_END_OF_STREAM,
                message="Stream ended before message_stop was received",
            )
        finally:
            await _aclose(events)
            await _aclose(frames)
            await _aclose(chunks)


class MessageStream:
    """A streaming response.

    Iterate it for raw events, use ``text_stream()`` for text only, or
    ``get_final_message()`` to drain it into an ``AccumulatedMessage``.
    Every event passed through is also folded into the accumulator, so
    the two styles can be mixed.

    Example:
        >>> async with client.messages.stream(model=..., messages=...) as stream:
        ...     async for text in stream.text_stream():
        ...         print(text, end="")
        ...     message = await stream.get_final_message()
    """

    def __init__(self, events: AsyncIterator[StreamEvent]) -> None:
        self._events = events
        self._accumulator = MessageAccumulator()
        self._closed = False

    def __aiter__(self) -> MessageStream:
        return self

    async def __anext__(self) -> StreamEvent:
        if self._closed:
            raise StopAsyncIteration
        event = await self._events.__anext__()
        self._accumulator.add(event)
        return event

    async def text_stream(self) -> AsyncIterator[str]:
        """Yield only the text of text deltas."""
        async for event in self:
            if isinstance(event, ContentBlockDelta):
                text = event.text
                if text is not None:
                    yield text

    async def get_final_message(self) -> AccumulatedMessage:
        """Consume the remaining events and return the accumulated message.

        The message's ``errors`` and ``complete`` fields show whether the
        stream ended cleanly.
        """
        async for _ in self:
            pass
        return self._accumulator.message

    @property
    def current_message(self) -> AccumulatedMessage:
        """The message accumulated so far."""
        return self._accumulator.message

    async def aclose(self) -> None:
        """Stop the stream and release the underlying response."""
        if not self._closed:
            self._closed = True
            await _aclose(self._events)

    async def __aenter__(self) -> MessageStream:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()
