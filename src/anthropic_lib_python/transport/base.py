"""
Transport abstraction.

The stream decoder and batch poller only need two operations from a
transport: a single-shot request and a streaming request yielding raw
chunks. Anything satisfying ``Transport`` can drive them, which is how the
tests substitute scripted transports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to issue one API request.

    Attributes:
        method: HTTP method
        path: Path relative to the API base URL
        json: JSON body
        params: Query parameters
        headers: Extra headers
    """

    method: str
    path: str
    json: dict[str, Any] | None = None
    params: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def get(cls, path: str, params: dict[str, Any] | None = None) -> RequestDescriptor:
        return cls("GET", path, params=params)

    @classmethod
    def post(cls, path: str, json: dict[str, Any] | None = None) -> RequestDescriptor:
        return cls("POST", path, json=json)


@runtime_checkable
class Transport(Protocol):
    """Request-issuing collaborator.

    Each call must use its own response channel so concurrent streams and
    polls never see each other's data.
    """

    async def send(self, request: RequestDescriptor) -> httpx.Response:
        """Issue a request and return the complete response.

        Raises:
            TransportError: On network/connection failure
            RemoteError: On an API error response
        """
        ...

    def stream(self, request: RequestDescriptor) -> AsyncIterator[bytes]:
        """Issue a request and yield the response body as it arrives.

        Closing the returned iterator releases the underlying response.

        Raises:
            TransportError: On network/connection failure, including mid-stream
            RemoteError: On an API error response
        """
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...
