"""
Client configuration.

Explicit values win over environment variables:
- ANTHROPIC_API_KEY: API key (falls back to the system keyring)
- ANTHROPIC_BASE_URL: API base URL
- ANTHROPIC_TIMEOUT_SECS: Request timeout
- ANTHROPIC_BATCH_POLL_INITIAL_SECS / ANTHROPIC_BATCH_POLL_MAX_SECS: Batch polling
"""

from __future__ import annotations

import os
from contextlib import suppress
from dataclasses import dataclass, field

from anthropic_lib_python.batch.backoff import BackoffPolicy
from anthropic_lib_python.transport.auth import resolve_api_key
from anthropic_lib_python.transport.http import DEFAULT_API_VERSION, DEFAULT_BASE_URL


@dataclass
class ClientConfig:
    """Configuration for ``AnthropicClient``.

    Attributes:
        api_key: API key
        base_url: API base URL
        api_version: ``anthropic-version`` header value
        timeout: Request timeout in seconds (None: transport default)
        backoff: Batch polling backoff
        batch_chunk_size: Requests per batch for chunked submission
    """

    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    timeout: float | None = None
    backoff: BackoffPolicy = field(default_factory=BackoffPolicy)
    batch_chunk_size: int = 10

    @classmethod
    def from_env(cls, api_key: str | None = None) -> ClientConfig:
        """Create a configuration from environment variables.

        Args:
            api_key: Explicit API key, overriding the environment
        """
        timeout = None
        env_timeout = os.getenv("ANTHROPIC_TIMEOUT_SECS")
        if env_timeout:
            with suppress(ValueError):
                timeout = float(env_timeout)

        return cls(
            api_key=resolve_api_key(api_key),
            base_url=os.getenv("ANTHROPIC_BASE_URL") or DEFAULT_BASE_URL,
            timeout=timeout,
            backoff=BackoffPolicy.from_env(),
        )
