"""
Pipeline layer - Stream processing operators.

This module implements the operators for processing streaming responses:
- FrameDecoder: Parses raw chunks into SSE frames
- EventMapper: Converts frames to typed stream events
- StreamDecoder: Drives both stages and enforces stream termination
- MessageAccumulator: Rebuilds a complete message from events
"""

from anthropic_lib_python.pipeline.accumulate import AccumulatedMessage, MessageAccumulator
from anthropic_lib_python.pipeline.base import EventMapper, FrameDecoder
from anthropic_lib_python.pipeline.decode import SSEFrame, SSEFrameDecoder, parse_frame
from anthropic_lib_python.pipeline.event_map import ApiEventMapper
from anthropic_lib_python.pipeline.stream import MessageStream, StreamDecoder

__all__ = [
    "AccumulatedMessage",
    "ApiEventMapper",
    "EventMapper",
    "FrameDecoder",
    "MessageAccumulator",
    "MessageStream",
    "SSEFrame",
    "SSEFrameDecoder",
    "StreamDecoder",
    "parse_frame",
]
