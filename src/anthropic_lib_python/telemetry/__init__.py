"""
Telemetry module for anthropic-lib-python.

Provides structured, key-masking logging.
"""

from anthropic_lib_python.telemetry.logger import (
    JsonFormatter,
    LibLogger,
    LogContext,
    LogLevel,
    SensitiveDataMasker,
    TextFormatter,
    clear_log_context,
    get_log_context,
    get_logger,
    set_log_context,
)

__all__ = [
    "JsonFormatter",
    "LibLogger",
    "LogContext",
    "LogLevel",
    "SensitiveDataMasker",
    "TextFormatter",
    "clear_log_context",
    "get_log_context",
    "get_logger",
    "set_log_context",
]
