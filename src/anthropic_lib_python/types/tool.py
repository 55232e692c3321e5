"""
Tool types for tool use.

Tool inputs arrive as free-form JSON. They are typed as ``JsonValue`` and
checked twice at the boundary: against the JSON value grammar (pydantic)
and against the tool's declared ``input_schema`` (jsonschema).
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue, TypeAdapter

JsonObject = dict[str, JsonValue]

_json_object_adapter: TypeAdapter[JsonObject] = TypeAdapter(JsonObject)


def to_json_object(value: Any) -> JsonObject:
    """Validate that ``value`` is a JSON object and return it typed.

    Raises:
        pydantic.ValidationError: If the value is not a JSON object
    """
    return _json_object_adapter.validate_python(value)


class ToolDefinition(BaseModel):
    """Tool definition sent with a request.

    Example:
        >>> tool = ToolDefinition(
        ...     name="get_weather",
        ...     description="Get weather for a city",
        ...     input_schema={
        ...         "type": "object",
        ...         "properties": {"city": {"type": "string"}},
        ...         "required": ["city"],
        ...     },
        ... )
    """

    name: str = Field(pattern=r"^[a-zA-Z0-9_-]{1,64}$")
    description: str = ""
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


class ToolUse(BaseModel):
    """A tool call requested by the model."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    input: JsonObject = Field(default_factory=dict)


class ToolResult(BaseModel):
    """Result of executing a tool, sent back as a ``tool_result`` block."""

    tool_use_id: str
    content: str
    is_error: bool = False

    @classmethod
    def from_output(cls, tool_use_id: str, output: JsonValue) -> ToolResult:
        """Wrap a handler's output; non-string values are JSON-encoded."""
        content = output if isinstance(output, str) else json.dumps(output)
        return cls(tool_use_id=tool_use_id, content=content)

    @classmethod
    def error(cls, tool_use_id: str, message: str) -> ToolResult:
        return cls(tool_use_id=tool_use_id, content=message, is_error=True)

    def to_content_block(self) -> dict[str, Any]:
        return {
            "type": "tool_result",
            "tool_use_id": self.tool_use_id,
            "content": self.content,
            "is_error": self.is_error,
        }
