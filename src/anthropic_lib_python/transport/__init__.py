"""
Transport layer - HTTP client for API communication.

Provides:
- Transport protocol and RequestDescriptor
- httpx-based HttpTransport with streaming support
- API key resolution
"""

from anthropic_lib_python.transport.auth import (
    get_auth_headers,
    resolve_api_key,
    store_api_key,
    validate_api_key,
)
from anthropic_lib_python.transport.base import RequestDescriptor, Transport
from anthropic_lib_python.transport.http import (
    DEFAULT_API_VERSION,
    DEFAULT_BASE_URL,
    HttpTransport,
)

__all__ = [
    "DEFAULT_API_VERSION",
    "DEFAULT_BASE_URL",
    "HttpTransport",
    "RequestDescriptor",
    "Transport",
    "get_auth_headers",
    "resolve_api_key",
    "store_api_key",
    "validate_api_key",
]
