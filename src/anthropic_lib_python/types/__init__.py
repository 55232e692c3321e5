"""
Type definitions for anthropic-lib-python.

- events: Streaming events (StreamEvent union)
- message: Messages API request/response types
- batch: Message Batches types
- tool: Tool definitions, tool calls and results
- model: Models API types
"""

from anthropic_lib_python.types.batch import (
    MAX_BATCH_REQUESTS,
    Batch,
    BatchError,
    BatchPage,
    BatchRequest,
    BatchResult,
    BatchResultType,
    BatchStatus,
    RequestCounts,
    validate_batch_requests,
)
from anthropic_lib_python.types.events import (
    PARSING_ERROR,
    RECOVERABLE_ERROR_KINDS,
    UNEXPECTED_END_OF_STREAM,
    ContentBlockDelta,
    ContentBlockStart,
    ContentBlockStop,
    Delta,
    InputJsonDelta,
    MessageDelta,
    MessageStart,
    MessageStop,
    SignatureDelta,
    StreamError,
    StreamEvent,
    TextDelta,
    ThinkingDelta,
)
from anthropic_lib_python.types.message import (
    ContentBlock,
    Message,
    MessageResponse,
    MessageRole,
    Usage,
)
from anthropic_lib_python.types.model import ModelInfo, ModelPage
from anthropic_lib_python.types.tool import (
    JsonObject,
    JsonValue,
    ToolDefinition,
    ToolResult,
    ToolUse,
    to_json_object,
)

__all__ = [
    "MAX_BATCH_REQUESTS",
    "PARSING_ERROR",
    "RECOVERABLE_ERROR_KINDS",
    "UNEXPECTED_END_OF_STREAM",
    # Batch
    "Batch",
    "BatchError",
    "BatchPage",
    "BatchRequest",
    "BatchResult",
    "BatchResultType",
    "BatchStatus",
    "RequestCounts",
    "validate_batch_requests",
    # Events
    "ContentBlockDelta",
    "ContentBlockStart",
    "ContentBlockStop",
    "Delta",
    "InputJsonDelta",
    "MessageDelta",
    "MessageStart",
    "MessageStop",
    "SignatureDelta",
    "StreamError",
    "StreamEvent",
    "TextDelta",
    "ThinkingDelta",
    # Message
    "ContentBlock",
    "Message",
    "MessageResponse",
    "MessageRole",
    "Usage",
    # Model
    "ModelInfo",
    "ModelPage",
    # Tool
    "JsonObject",
    "JsonValue",
    "ToolDefinition",
    "ToolResult",
    "ToolUse",
    "to_json_object",
]
