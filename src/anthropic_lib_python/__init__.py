"""Anthropic Messages API 的 Python 客户端：流式解码与批处理轮询。

anthropic-lib-python: async Python client for the Messages and Message Batches APIs.

Streaming responses are decoded into typed events; batches are submitted,
polled with capped exponential backoff and their results collected.
"""
from __future__ import annotations

from anthropic_lib_python._features import HAS_HTTP2, HAS_KEYRING, require_extra
from anthropic_lib_python.batch import (
    BackoffPolicy,
    BatchPoller,
    BatchesResource,
    ChunkedBatchOutcome,
    ChunkedBatchRunner,
)
from anthropic_lib_python.client import AnthropicClient, ClientConfig, ToolRunResult
from anthropic_lib_python.errors import (
    AnthropicLibError,
    BatchTerminalError,
    NoResultsError,
    ParsingError,
    RemoteError,
    ToolError,
    TransportError,
    ValidationError,
)
from anthropic_lib_python.pipeline import AccumulatedMessage, MessageStream, StreamDecoder
from anthropic_lib_python.tools import ToolRegistry
from anthropic_lib_python.transport import HttpTransport, RequestDescriptor, Transport
from anthropic_lib_python.types.batch import Batch, BatchRequest, BatchResult, BatchStatus
from anthropic_lib_python.types.events import StreamError, StreamEvent
from anthropic_lib_python.types.message import (
    ContentBlock,
    Message,
    MessageResponse,
    MessageRole,
    Usage,
)
from anthropic_lib_python.types.model import ModelInfo, ModelPage
from anthropic_lib_python.types.tool import ToolDefinition, ToolResult, ToolUse

__version__ = "0.1.0"

__all__ = [
    # Client
    "AnthropicClient",
    "ClientConfig",
    "ToolRunResult",
    # Feature flags
    "HAS_HTTP2",
    "HAS_KEYRING",
    "require_extra",
    # Streaming
    "AccumulatedMessage",
    "MessageStream",
    "StreamDecoder",
    "StreamError",
    "StreamEvent",
    # Batches
    "BackoffPolicy",
    "Batch",
    "BatchPoller",
    "BatchRequest",
    "BatchResult",
    "BatchStatus",
    "BatchesResource",
    "ChunkedBatchOutcome",
    "ChunkedBatchRunner",
    # Errors
    "AnthropicLibError",
    "BatchTerminalError",
    "NoResultsError",
    "ParsingError",
    "RemoteError",
    "ToolError",
    "TransportError",
    "ValidationError",
    # Models
    "ModelInfo",
    "ModelPage",
    # Tools
    "ToolDefinition",
    "ToolRegistry",
    "ToolResult",
    "ToolUse",
    # Transport
    "HttpTransport",
    "RequestDescriptor",
    "Transport",
    # Types - Message
    "ContentBlock",
    "Message",
    "MessageResponse",
    "MessageRole",
    "Usage",
    # Version
    "__version__",
]
