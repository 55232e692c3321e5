"""
Client layer - User-facing API.

This module provides:
- AnthropicClient: Main entry point
- ClientConfig: Configuration with environment fallbacks
- Messages: Message creation and streaming
- Models: Model listing and lookup
"""

from anthropic_lib_python.client.config import ClientConfig
from anthropic_lib_python.client.core import AnthropicClient, ToolRunResult
from anthropic_lib_python.client.messages import Messages, build_payload, validate_payload
from anthropic_lib_python.client.models import Models

__all__ = [
    "AnthropicClient",
    "ClientConfig",
    "Messages",
    "Models",
    "ToolRunResult",
    "build_payload",
    "validate_payload",
]
