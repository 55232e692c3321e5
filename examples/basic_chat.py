#!/usr/bin/env python3
"""
Basic message example.

This example demonstrates the simplest way to use anthropic-lib-python
to create a message.

Usage:
    export ANTHROPIC_API_KEY="your-api-key"
    python examples/basic_chat.py

To keep the key in the system keyring instead (needs the keyring extra):
    python -c "from anthropic_lib_python.transport import store_api_key; store_api_key('sk-ant-...')"
"""

import asyncio

from anthropic_lib_python import AnthropicClient, Message

MODEL = "claude-sonnet-4-5"


async def main() -> None:
    """Run basic message example."""
    # Configuration comes from ANTHROPIC_* environment variables
    async with AnthropicClient() as client:
        page = await client.models.list(limit=5)
        print("Models:", ", ".join(page.ids))
        print()

        response = await client.messages.create(
            model=MODEL,
            max_tokens=256,
            system="You are a helpful assistant.",
            messages=[Message.user("What is the capital of France?")],
        )
        print(f"Response: {response.text}")
        print(f"Stop reason: {response.stop_reason}")
        print(f"Tokens: {response.usage.input_tokens} in, {response.usage.output_tokens} out")
        print()

        # Multi-turn: feed the answer back as an assistant message
        response = await client.messages.create(
            model=MODEL,
            max_tokens=256,
            messages=[
                Message.user("Pick a number between 1 and 10."),
                Message.assistant(response.text or "7"),
                Message.user("Now double it."),
            ],
        )
        print(f"Follow-up: {response.text}")


if __name__ == "__main__":
    asyncio.run(main())
