"""
Tool registry.

Maps tool names to handlers. A handler is a plain function
``(tool_name, input) -> output`` that reports failure by raising
``ToolError``. Inputs are validated against the tool's ``input_schema``
before the handler runs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

import jsonschema
from jsonschema import Draft202012Validator

from anthropic_lib_python.errors import ToolError, ValidationError
from anthropic_lib_python.telemetry import get_logger
from anthropic_lib_python.types.message import ContentBlock
from anthropic_lib_python.types.tool import (
    JsonObject,
    JsonValue,
    ToolDefinition,
    ToolResult,
    ToolUse,
    to_json_object,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = get_logger("anthropic_lib_python.tools")

ToolHandler = Callable[[str, JsonObject], JsonValue]


class _RegisteredTool:
    __slots__ = ("definition", "handler", "validator")

    def __init__(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        self.definition = definition
        self.handler = handler
        self.validator = Draft202012Validator(definition.input_schema)


class ToolRegistry:
    """Registry of callable tools.

    Example:
        >>> registry = ToolRegistry()
        >>> @registry.tool(
        ...     description="Get the current weather",
        ...     input_schema={
        ...         "type": "object",
        ...         "properties": {"location": {"type": "string"}},
        ...         "required": ["location"],
        ...     },
        ... )
        ... def get_weather(name, args):
        ...     return {"location": args["location"], "temperature": 22}
        >>> result = registry.invoke(tool_use)
    """

    def __init__(self) -> None:
        self._tools: dict[str, _RegisteredTool] = {}

    def register(self, definition: ToolDefinition, handler: ToolHandler) -> ToolRegistry:
        """Register a tool.

        Args:
            definition: Tool definition sent to the model
            handler: Function executing the tool

        Returns:
            Self for chaining

        Raises:
            ValueError: If a tool with the same name is registered
            ValidationError: If the input schema is not a valid JSON Schema
        """
        if definition.name in self._tools:
            raise ValueError(f"Tool already registered: {definition.name}")
        try:
            Draft202012Validator.check_schema(definition.input_schema)
        except jsonschema.SchemaError as e:
            raise ValidationError(
                f"Invalid input_schema for tool '{definition.name}': {e.message}",
                field="input_schema",
            ) from e

        self._tools[definition.name] = _RegisteredTool(definition, handler)
        return self

    def tool(
        self,
        name: str | None = None,
        *,
        description: str = "",
        input_schema: dict[str, Any] | None = None,
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator registering a function as a tool.

        The tool name defaults to the function name and the description to
        its docstring.
        """

        def decorator(func: ToolHandler) -> ToolHandler:
            definition = ToolDefinition(
                name=name or func.__name__,
                description=description or (func.__doc__ or "").strip(),
                input_schema=input_schema or {"type": "object", "properties": {}},
            )
            self.register(definition, func)
            return func

        return decorator

    def unregister(self, name: str) -> bool:
        return self._tools.pop(name, None) is not None

    def get(self, name: str) -> ToolDefinition | None:
        registered = self._tools.get(name)
        return registered.definition if registered else None

    def has(self, name: str) -> bool:
        return name in self._tools

    def definitions(self) -> list[ToolDefinition]:
        """Definitions of all tools, in registration order."""
        return [t.definition for t in self._tools.values()]

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self.definitions())

    def invoke(self, tool_use: ToolUse | ContentBlock) -> ToolResult:
        """Run the tool requested by ``tool_use``.

        Unknown tools, schema violations and ``ToolError`` raised by the
        handler become ``is_error`` results for the model to see. Any
        other exception propagates.
        """
        if isinstance(tool_use, ContentBlock):
            tool_use = ToolUse(
                id=tool_use.id or "", name=tool_use.name or "", input=tool_use.input or {}
            )

        registered = self._tools.get(tool_use.name)
        if registered is None:
            logger.warning("Unknown tool requested", tool=tool_use.name)
            return ToolResult.error(tool_use.id, f"Unknown tool: {tool_use.name}")

        tool_input = to_json_object(tool_use.input)
        violations = sorted(registered.validator.iter_errors(tool_input), key=lambda e: e.json_path)
        if violations:
            details = "; ".join(_describe(v) for v in violations)
            logger.warning("Tool input failed validation", tool=tool_use.name, errors=details)
            return ToolResult.error(tool_use.id, f"Invalid input for {tool_use.name}: {details}")

        try:
            output = registered.handler(tool_use.name, tool_input)
        except ToolError as e:
            logger.info("Tool reported an error", tool=tool_use.name, error=e.message)
            return ToolResult.error(tool_use.id, e.message)

        logger.debug("Tool executed", tool=tool_use.name)
        return ToolResult.from_output(tool_use.id, output)


def _describe(error: jsonschema.ValidationError) -> str:
    path = "/".join(str(p) for p in error.path)
    return f"{path}: {error.message}" if path else error.message
