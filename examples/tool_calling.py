#!/usr/bin/env python3
"""
Tool use example.

This example demonstrates how to register tools the model can call and
let the client run the tool-use loop until the model answers.

Usage:
    export ANTHROPIC_API_KEY="your-api-key"
    python examples/tool_calling.py
"""

import asyncio
from typing import Any

from anthropic_lib_python import AnthropicClient, Message, ToolError, ToolRegistry

registry = ToolRegistry()


# Simulated tool implementations
@registry.tool(
    description="Get the current weather for a location",
    input_schema={
        "type": "object",
        "properties": {
            "location": {
                "type": "string",
                "description": "The city name, e.g., 'Tokyo', 'London'",
            },
            "unit": {"type": "string", "enum": ["celsius", "fahrenheit"]},
        },
        "required": ["location"],
    },
)
def get_weather(name: str, args: dict[str, Any]) -> dict[str, Any]:
    weather_data = {
        "Tokyo": {"temp": 22, "condition": "Sunny"},
        "London": {"temp": 15, "condition": "Cloudy"},
    }
    location = args["location"]
    if location not in weather_data:
        # Reported back to the model as an is_error tool result
        raise ToolError(f"No weather data for {location}", tool_name=name)

    data = dict(weather_data[location])
    if args.get("unit") == "fahrenheit":
        data["temp"] = data["temp"] * 9 / 5 + 32
    return {"location": location, **data}


@registry.tool(
    description="Search the knowledge database for information",
    input_schema={
        "type": "object",
        "properties": {
            "query": {"type": "string"},
            "limit": {"type": "integer", "minimum": 1, "default": 5},
        },
        "required": ["query"],
    },
)
def search_database(name: str, args: dict[str, Any]) -> list[dict[str, Any]]:
    query = args["query"]
    return [
        {"id": 1, "title": f"Result for: {query}", "score": 0.95},
        {"id": 2, "title": f"Related to: {query}", "score": 0.87},
    ][: args.get("limit", 5)]


async def main() -> None:
    """Run tool use example."""
    async with AnthropicClient() as client:
        result = await client.run_with_tools(
            [Message.user("What's the weather like in Tokyo and in Atlantis?")],
            registry,
            model="claude-sonnet-4-5",
            max_tokens=1024,
            max_turns=5,
        )

    for message in result.messages:
        if isinstance(message.content, str):
            print(f"[{message.role.value}] {message.content}")
            continue
        for block in message.content:
            if block.type == "tool_use":
                print(f"[{message.role.value}] tool_use {block.name}({block.input})")
            elif block.type == "tool_result":
                flag = " (error)" if block.is_error else ""
                print(f"[{message.role.value}] tool_result{flag}: {block.content}")

    print(f"\nAnswer after {result.turns} turns:\n{result.text}")


if __name__ == "__main__":
    asyncio.run(main())
