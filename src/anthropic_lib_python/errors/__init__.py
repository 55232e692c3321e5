"""错误体系：提供结构化错误类型与错误分类。

Error hierarchy for anthropic-lib-python.
"""

from anthropic_lib_python.errors.base import (
    AnthropicLibError,
    BatchTerminalError,
    ErrorContext,
    NoResultsError,
    ParsingError,
    RemoteError,
    ToolError,
    TransportError,
    ValidationError,
)
from anthropic_lib_python.errors.classification import (
    ErrorClass,
    classify_http_error,
    extract_error_message,
    extract_error_type,
    is_retryable,
)

__all__ = [
    "AnthropicLibError",
    "BatchTerminalError",
    "ErrorClass",
    "ErrorContext",
    "NoResultsError",
    "ParsingError",
    "RemoteError",
    "ToolError",
    "TransportError",
    "ValidationError",
    "classify_http_error",
    "extract_error_message",
    "extract_error_type",
    "is_retryable",
]
