"""Root pytest fixtures for anthropic-lib-python tests."""

from __future__ import annotations

import json
from collections import defaultdict
from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from anthropic_lib_python.transport.base import RequestDescriptor


class FakeTransport:
    """Scripted transport.

    ``send`` answers from per-route queues filled with ``add_json`` /
    ``add_text`` / ``add_error``. ``stream`` yields ``stream_chunks`` and
    then raises ``stream_error`` if set.
    """

    def __init__(self) -> None:
        self.requests: list[RequestDescriptor] = []
        self._routes: dict[tuple[str, str], list[Any]] = defaultdict(list)
        self.stream_chunks: list[bytes | str] = []
        self.stream_error: Exception | None = None
        self.chunks_read = 0
        self.stream_closed = False
        self.closed = False

    def add_json(self, method: str, path: str, body: Any, status_code: int = 200) -> None:
        self._routes[(method, path)].append(httpx.Response(status_code, json=body))

    def add_text(self, method: str, path: str, text: str, status_code: int = 200) -> None:
        self._routes[(method, path)].append(httpx.Response(status_code, text=text))

    def add_error(self, method: str, path: str, error: Exception) -> None:
        self._routes[(method, path)].append(error)

    def requests_to(self, method: str, path: str) -> list[RequestDescriptor]:
        return [r for r in self.requests if r.method == method and r.path == path]

    async def send(self, request: RequestDescriptor) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.path))
        if not queue:
            raise AssertionError(f"Unexpected request: {request.method} {request.path}")
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def stream(self, request: RequestDescriptor) -> AsyncIterator[bytes | str]:
        self.requests.append(request)
        try:
            for chunk in self.stream_chunks:
                self.chunks_read += 1
                yield chunk
            if self.stream_error is not None:
                raise self.stream_error
        finally:
            self.stream_closed = True

    async def close(self) -> None:
        self.closed = True


class RecordingSleep:
    """Async sleep replacement recording requested intervals."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def sse(event_type: str, **payload: Any) -> str:
    """Render one SSE frame for an event of ``event_type``."""
    data = json.dumps({"type": event_type, **payload})
    return f"event: {event_type}\ndata: {data}\n\n"


def text_message_events(text: str = "Hello world", message_id: str = "msg_1") -> list[str]:
    """Frames of a complete single-text-block message stream."""
    return [
        sse(
            "message_start",
            message={
                "id": message_id,
                "type": "message",
                "role": "assistant",
                "model": "claude-sonnet-4-5",
                "content": [],
                "usage": {"input_tokens": 12, "output_tokens": 1},
            },
        ),
        sse("content_block_start", index=0, content_block={"type": "text", "text": ""}),
        sse("ping"),
        *[
            sse("content_block_delta", index=0, delta={"type": "text_delta", "text": word})
            for word in _split_keep(text)
        ],
        sse("content_block_stop", index=0),
        sse("message_delta", delta={"stop_reason": "end_turn"}, usage={"output_tokens": 5}),
        sse("message_stop"),
    ]


def _split_keep(text: str) -> list[str]:
    parts = text.split(" ")
    return [p + " " for p in parts[:-1]] + [parts[-1]]


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of the tests."""
    for name in (
        "ANTHROPIC_API_KEY",
        "ANTHROPIC_BASE_URL",
        "ANTHROPIC_TIMEOUT_SECS",
        "ANTHROPIC_BATCH_POLL_INITIAL_SECS",
        "ANTHROPIC_BATCH_POLL_MAX_SECS",
        "AI_HTTP_TRUST_ENV",
        "AI_PROXY_URL",
    ):
        monkeypatch.delenv(name, raising=False)
