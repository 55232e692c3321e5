"""
Integration test helper utilities.

Shared fixtures and utilities for integration tests. Responses are served
by ``pytest-httpx`` so requests go through the real ``HttpTransport``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest_asyncio

from anthropic_lib_python import AnthropicClient, BackoffPolicy, ClientConfig
from tests.conftest import text_message_events

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import pytest_httpx

BASE_URL = "https://api.anthropic.com"
MESSAGES_URL = f"{BASE_URL}/v1/messages"
BATCHES_URL = f"{BASE_URL}/v1/messages/batches"
MODELS_URL = f"{BASE_URL}/v1/models"


def mock_message_response(
    content: str = "Hello from Claude!",
    model: str = "claude-sonnet-4-5",
    stop_reason: str = "end_turn",
    tool_uses: list[dict] | None = None,
) -> dict:
    """Create a mock Messages API response."""
    blocks: list[dict[str, Any]] = []
    if content:
        blocks.append({"type": "text", "text": content})
    for call in tool_uses or []:
        blocks.append({"type": "tool_use", **call})

    return {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "model": model,
        "content": blocks,
        "stop_reason": "tool_use" if tool_uses else stop_reason,
        "usage": {"input_tokens": 10, "output_tokens": 20},
    }


def mock_batch(batch_id: str, status: str, succeeded: int = 0, total: int = 2) -> dict:
    """Create a mock Message Batch object."""
    body: dict[str, Any] = {
        "id": batch_id,
        "type": "message_batch",
        "processing_status": status,
        "request_counts": {
            "processing": total - succeeded if status == "in_progress" else 0,
            "succeeded": succeeded,
            "errored": 0,
            "canceled": 0,
            "expired": 0,
        },
        "created_at": "2026-01-01T00:00:00Z",
    }
    if status == "ended":
        body["results_url"] = f"{BATCHES_URL}/{batch_id}/results"
    return body


def mock_results_jsonl(custom_ids: list[str]) -> str:
    """Create a JSONL results body where every request succeeded."""
    lines = [
        json.dumps(
            {
                "custom_id": custom_id,
                "result": {
                    "type": "succeeded",
                    "message": mock_message_response(content=f"answer {custom_id}"),
                },
            }
        )
        for custom_id in custom_ids
    ]
    return "\n".join(lines) + "\n"


def setup_mock_message(httpx_mock: pytest_httpx.HTTPXMock, **kwargs: Any) -> None:
    """Set up one non-streaming message response."""
    httpx_mock.add_response(url=MESSAGES_URL, method="POST", json=mock_message_response(**kwargs))


def setup_mock_stream(
    httpx_mock: pytest_httpx.HTTPXMock,
    text: str = "Hello world",
    frames: list[str] | None = None,
) -> None:
    """Set up one streaming message response."""
    body = "".join(frames if frames is not None else text_message_events(text))
    httpx_mock.add_response(
        url=MESSAGES_URL,
        method="POST",
        content=body.encode(),
        headers={"content-type": "text/event-stream"},
    )


def setup_mock_batch_run(
    httpx_mock: pytest_httpx.HTTPXMock,
    batch_id: str,
    custom_ids: list[str],
    polls_in_progress: int = 1,
) -> None:
    """Set up create, ``polls_in_progress`` busy polls, a final ended poll and results."""
    total = len(custom_ids)
    httpx_mock.add_response(
        url=BATCHES_URL, method="POST", json=mock_batch(batch_id, "in_progress", total=total)
    )
    for _ in range(polls_in_progress):
        httpx_mock.add_response(
            url=f"{BATCHES_URL}/{batch_id}",
            method="GET",
            json=mock_batch(batch_id, "in_progress", total=total),
        )
    httpx_mock.add_response(
        url=f"{BATCHES_URL}/{batch_id}",
        method="GET",
        json=mock_batch(batch_id, "ended", succeeded=total, total=total),
    )
    httpx_mock.add_response(
        url=f"{BATCHES_URL}/{batch_id}/results",
        method="GET",
        text=mock_results_jsonl(custom_ids),
    )


@pytest_asyncio.fixture
async def client() -> AsyncIterator[AnthropicClient]:
    """Client over the real HTTP transport with near-immediate polling."""
    config = ClientConfig(
        api_key="sk-ant-test-0123456789",
        backoff=BackoffPolicy(initial_interval=0.001, max_interval=0.001),
    )
    async with AnthropicClient(config) as c:
        yield c
