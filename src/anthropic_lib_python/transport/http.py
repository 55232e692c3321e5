"""HTTP 传输层：基于 httpx 的异步 HTTP 客户端，支持流式传输和代理。

HTTP transport using httpx for async requests.

Provides:
- Single-shot JSON requests
- Streaming (server-sent events) requests
- Configurable timeouts and proxy
- Mapping of httpx failures to TransportError and of error responses
  to RemoteError
"""

from __future__ import annotations

import json as json_module
import os
from contextlib import suppress
from typing import TYPE_CHECKING, Any

import httpx

from anthropic_lib_python import _features
from anthropic_lib_python.errors import RemoteError, TransportError
from anthropic_lib_python.telemetry import get_logger
from anthropic_lib_python.transport.auth import get_auth_headers

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from anthropic_lib_python.transport.base import RequestDescriptor

logger = get_logger("anthropic_lib_python.transport")

DEFAULT_BASE_URL = "https://api.anthropic.com"
DEFAULT_API_VERSION = "2023-06-01"
_DEFAULT_TIMEOUT = 60.0
_DEFAULT_CONNECT_TIMEOUT = 10.0

_UA_VERSION: str | None = None


def _trust_env_enabled() -> bool:
    """Use env proxy settings only when explicitly enabled."""
    return os.getenv("AI_HTTP_TRUST_ENV", "0") == "1"


def _get_ua_version() -> str:
    """Get package version for User-Agent (cached)."""
    global _UA_VERSION
    if _UA_VERSION is None:
        try:
            from importlib.metadata import version

            _UA_VERSION = version("anthropic-lib-python")
        except Exception:
            _UA_VERSION = "0.1.0"
    return _UA_VERSION


def _resolve_timeout(timeout: float | None) -> float:
    if timeout is not None:
        return timeout
    env_timeout = os.getenv("ANTHROPIC_TIMEOUT_SECS")
    if env_timeout:
        with suppress(ValueError):
            return float(env_timeout)
    return _DEFAULT_TIMEOUT


def _transport_error(e: httpx.HTTPError, url: str) -> TransportError:
    if isinstance(e, httpx.ConnectError):
        message = f"Connection failed: {e}"
    elif isinstance(e, httpx.TimeoutException):
        message = f"Request timed out: {e}"
    else:
        message = f"HTTP error: {e}"
    return TransportError(message, url=url, cause=e)


class HttpTransport:
    """HTTP transport for the Anthropic API.

    Example:
        >>> transport = HttpTransport(api_key="sk-ant-...")
        >>> response = await transport.send(RequestDescriptor.get("/v1/messages/batches/b1"))
        >>> async for chunk in transport.stream(RequestDescriptor.post("/v1/messages", body)):
        ...     process(chunk)
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float | None = None,
        proxy: str | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            api_key: API key sent as ``x-api-key``
            base_url: API base URL
            api_version: Value of the ``anthropic-version`` header
            timeout: Request timeout in seconds (env ANTHROPIC_TIMEOUT_SECS, default 60)
            proxy: Proxy URL
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = _resolve_timeout(timeout)

        if proxy is not None:
            self._proxy: str | None = proxy
        elif _trust_env_enabled():
            self._proxy = os.getenv("AI_PROXY_URL")
        else:
            self._proxy = None

        self._auth_headers = get_auth_headers(api_key, api_version)
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout, connect=_DEFAULT_CONNECT_TIMEOUT),
                proxy=self._proxy,
                http2=_features.HAS_HTTP2,
                trust_env=_trust_env_enabled(),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_headers(self, extra_headers: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": f"anthropic-lib-python/{_get_ua_version()}",
        }
        headers.update(self._auth_headers)
        if extra_headers:
            headers.update(extra_headers)
        return headers

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def send(self, request: RequestDescriptor) -> httpx.Response:
        """Make a single-shot request.

        Raises:
            TransportError: On network/connection errors
            RemoteError: On API errors (4xx, 5xx)
        """
        client = self._get_client()
        logger.debug("Sending request", method=request.method, path=request.path)

        try:
            response = await client.request(
                method=request.method,
                url=request.path,
                json=request.json,
                params=request.params,
                headers=self._build_headers(request.headers),
            )
        except httpx.HTTPError as e:
            raise _transport_error(e, self._url(request.path)) from e

        if response.status_code >= 400:
            body = None
            with suppress(ValueError):
                body = response.json()
            raise RemoteError.from_response(
                status_code=response.status_code,
                body=body if isinstance(body, dict) else None,
                headers=dict(response.headers),
            )

        return response

    async def stream(self, request: RequestDescriptor) -> AsyncIterator[bytes]:
        """Make a streaming request and yield raw body chunks.

        The response is opened lazily on first iteration and closed when
        the generator finishes or is closed by the consumer.

        Raises:
            TransportError: On network errors, including mid-stream
            RemoteError: On API errors (4xx, 5xx)
        """
        client = self._get_client()
        headers = self._build_headers(request.headers)
        headers["Accept"] = "text/event-stream"
        logger.debug("Opening stream", method=request.method, path=request.path)

        try:
            async with client.stream(
                method=request.method,
                url=request.path,
                json=request.json,
                params=request.params,
                headers=headers,
            ) as response:
                if response.status_code >= 400:
                    body_text = await response.aread()
                    body = None
                    with suppress(ValueError):
                        body = json_module.loads(body_text)
                    raise RemoteError.from_response(
                        status_code=response.status_code,
                        body=body if isinstance(body, dict) else None,
                        headers=dict(response.headers),
                    )

                async for chunk in response.aiter_bytes():
                    yield chunk
        except httpx.HTTPError as e:
            raise _transport_error(e, self._url(request.path)) from e

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
