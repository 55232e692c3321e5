"""
Server-sent events frame decoder.

Parses the event stream format used by the Messages API:
```
event: message_start
data: {"type": "message_start", ...}

event: content_block_delta
data: {"type": "content_block_delta", ...}
```
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from typing import TYPE_CHECKING

from anthropic_lib_python.pipeline.base import FrameDecoder

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@dataclass(frozen=True)
class SSEFrame:
    """One server-sent event.

    Attributes:
        event: Value of the ``event:`` field, if any
        data: ``data:`` lines joined with newlines
    """

    event: str | None
    data: str


def parse_frame(segment: str) -> SSEFrame | None:
    """Parse one blank-line-delimited segment.

    Returns:
        The frame, or None if the segment has no data lines
    """
    event: str | None = None
    data_lines: list[str] = []

    for line in segment.split("\n"):
        if not line or line.startswith(":"):
            continue

        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if name == "event":
            event = value.strip() or None
        elif name == "data":
            data_lines.append(value)
        # id: and retry: carry nothing the client uses

    if not data_lines:
        return None
    return SSEFrame(event=event, data="\n".join(data_lines))


class SSEFrameDecoder(FrameDecoder):
    """Incremental SSE decoder.

    Bytes go through an incremental UTF-8 decoder, so a multi-byte
    character split across two chunks decodes the same as if it had
    arrived whole. Line endings are normalized to ``\\n`` before frames are
    split on blank lines.

    Example:
        >>> decoder = SSEFrameDecoder()
        >>> async for frame in decoder.decode(response_chunks):
        ...     print(frame.event, frame.data)
    """

    async def decode(self, chunks: AsyncIterator[bytes | str]) -> AsyncIterator[SSEFrame]:
        text_decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        buffer = ""

        async for chunk in chunks:
            text = text_decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
            buffer = _normalize_newlines(buffer + text)

            while "\n\n" in buffer:
                segment, buffer = buffer.split("\n\n", 1)
                frame = parse_frame(segment)
                if frame is not None:
                    yield frame

        # End of input: flush the decoder and treat what is left as a frame
        buffer = (buffer + text_decoder.decode(b"", final=True)).replace("\r", "\n")
        for segment in buffer.split("\n\n"):
            frame = parse_frame(segment)
            if frame is not None:
                yield frame


def _normalize_newlines(text: str) -> str:
    """Normalize CRLF and CR to LF.

    A trailing ``\\r`` is kept as is, since the ``\\n`` completing it may
    arrive with the next chunk.
    """
    held = ""
    if text.endswith("\r"):
        text, held = text[:-1], "\r"
    return text.replace("\r\n", "\n").replace("\r", "\n") + held
