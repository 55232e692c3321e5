"""核心客户端实现：消息、流式、批处理与工具调用的统一入口。

Core AnthropicClient implementation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from anthropic_lib_python.batch.chunked import ChunkedBatchRunner
from anthropic_lib_python.batch.poller import BatchPoller
from anthropic_lib_python.client.config import ClientConfig
from anthropic_lib_python.client.messages import Messages
from anthropic_lib_python.client.models import Models
from anthropic_lib_python.telemetry import get_logger
from anthropic_lib_python.transport.auth import validate_api_key
from anthropic_lib_python.transport.http import HttpTransport
from anthropic_lib_python.types.message import ContentBlock, Message, MessageResponse

if TYPE_CHECKING:
    from collections.abc import Sequence

    from anthropic_lib_python.tools.registry import ToolRegistry
    from anthropic_lib_python.transport.base import Transport

logger = get_logger("anthropic_lib_python.client")


@dataclass
class ToolRunResult:
    """Outcome of a tool-use conversation.

    Attributes:
        response: Last response from the model
        messages: Full conversation, including tool calls and results
        turns: Number of model calls made
    """

    response: MessageResponse
    messages: list[Message] = field(default_factory=list)
    turns: int = 0

    @property
    def text(self) -> str:
        return self.response.text


class AnthropicClient:
    """Client for the Messages and Message Batches APIs.

    Example:
        >>> async with AnthropicClient() as client:
        ...     response = await client.messages.create(
        ...         model="claude-sonnet-4-5",
        ...         max_tokens=1024,
        ...         messages=[Message.user("Hello!")],
        ...     )
        ...     print(response.text)

        >>> # Streaming
        >>> async with client.messages.stream(model=..., max_tokens=..., messages=...) as stream:
        ...     async for text in stream.text_stream():
        ...         print(text, end="")

        >>> # Batches
        >>> batch = await client.batches.submit(requests)
        >>> results = await client.batches.wait_for_completion(batch.id)
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration (default: from environment)
            transport: Transport to use instead of an ``HttpTransport``
                built from ``config``

        Raises:
            ValidationError: If no transport is given and the API key is
                missing or malformed
        """
        self._config = config or ClientConfig.from_env()
        if transport is None:
            transport = HttpTransport(
                validate_api_key(self._config.api_key),
                base_url=self._config.base_url,
                api_version=self._config.api_version,
                timeout=self._config.timeout,
            )
        self._transport = transport
        self._messages = Messages(transport)
        self._models = Models(transport)
        self._batches = BatchPoller(transport, backoff=self._config.backoff)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def messages(self) -> Messages:
        """Messages API (create, stream)."""
        return self._messages

    @property
    def models(self) -> Models:
        """Models API (list, retrieve)."""
        return self._models

    @property
    def batches(self) -> BatchPoller:
        """Message Batches API (submit, poll_once, wait_for_completion, cancel)."""
        return self._batches

    def chunked_batches(self, chunk_size: int | None = None) -> ChunkedBatchRunner:
        """Runner splitting large request lists across several batches."""
        return ChunkedBatchRunner(self._batches, chunk_size or self._config.batch_chunk_size)

    async def run_with_tools(
        self,
        messages: Sequence[Message],
        registry: ToolRegistry,
        *,
        max_turns: int = 10,
        **params: Any,
    ) -> ToolRunResult:
        """Run a conversation, executing tool calls until the model stops asking.

        Each turn sends the conversation with the registry's tool
        definitions, runs every ``tool_use`` block of the response through
        the registry and appends the results as the next user message.

        Args:
            messages: Conversation so far
            registry: Tools the model may call
            max_turns: Upper bound on model calls
            **params: Message creation parameters (model, max_tokens, system, ...)

        Returns:
            The last response and the full conversation
        """
        if max_turns < 1:
            raise ValueError("max_turns must be >= 1")

        conversation = list(messages)
        tools = registry.definitions()

        for turn in range(1, max_turns + 1):
            response = await self._messages.create(
                messages=conversation, tools=tools or None, **params
            )
            conversation.append(Message.assistant(list(response.content)))
            tool_uses = response.tool_uses
            if not tool_uses:
                return ToolRunResult(response=response, messages=conversation, turns=turn)

            results = []
            for tool_use in tool_uses:
                logger.info("Running tool", tool=tool_use.name, turn=turn)
                result = registry.invoke(tool_use)
                results.append(
                    ContentBlock.tool_result(result.tool_use_id, result.content, result.is_error)
                )
            conversation.append(Message.user(results))

        logger.warning("Tool loop stopped at max_turns", max_turns=max_turns)
        return ToolRunResult(response=response, messages=conversation, turns=max_turns)

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()

    async def __aenter__(self) -> AnthropicClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
