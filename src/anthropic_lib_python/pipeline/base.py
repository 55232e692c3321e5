"""
Base abstractions for the pipeline layer.

A message stream is processed in two stages:
1. A frame decoder (bytes -> SSE frames)
2. An event mapper (SSE frames -> typed stream events)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from anthropic_lib_python.pipeline.decode import SSEFrame
    from anthropic_lib_python.types.events import StreamEvent


class FrameDecoder(ABC):
    """Abstract decoder that converts a chunk stream to SSE frames.

    Implementations keep a partial trailing frame buffered until more
    input arrives, so chunk boundaries never affect the frames produced.
    """

    @abstractmethod
    def decode(self, chunks: AsyncIterator[bytes | str]) -> AsyncIterator[SSEFrame]:
        """Decode a chunk stream into frames.

        Args:
            chunks: Async iterator of raw chunks, in arrival order

        Yields:
            Complete frames, in input order
        """
        ...


class EventMapper(ABC):
    """Abstract mapper that converts SSE frames to stream events."""

    @abstractmethod
    def map_events(self, frames: AsyncIterator[SSEFrame]) -> AsyncIterator[StreamEvent]:
        """Map frames to stream events.

        Args:
            frames: Async iterator of decoded frames

        Yields:
            Stream events, one per meaningful frame
        """
        ...
