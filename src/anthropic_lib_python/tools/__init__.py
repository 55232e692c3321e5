"""
Tool use support.

Provides:
- ToolRegistry: Name -> handler mapping with input schema validation
- ToolHandler: Handler function contract
"""

from anthropic_lib_python.tools.registry import ToolHandler, ToolRegistry

__all__ = [
    "ToolHandler",
    "ToolRegistry",
]
