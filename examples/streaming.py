#!/usr/bin/env python3
"""
Streaming response example.

This example demonstrates how to stream a message token by token
for real-time output, and how to inspect the accumulated result.

Usage:
    export ANTHROPIC_API_KEY="your-api-key"
    python examples/streaming.py
"""

import asyncio

from anthropic_lib_python import (
    AnthropicClient,
    Message,
    StreamError,
)
from anthropic_lib_python.types import ContentBlockDelta, MessageDelta

MODEL = "claude-sonnet-4-5"


async def main() -> None:
    """Run streaming example."""
    async with AnthropicClient() as client:
        print("Streaming response:\n")
        print("-" * 50)

        # Text only
        async with client.messages.stream(
            model=MODEL,
            max_tokens=500,
            system="You are a creative storyteller.",
            messages=[Message.user("Tell me a very short story about a robot learning to paint.")],
        ) as stream:
            async for text in stream.text_stream():
                print(text, end="", flush=True)

            final = await stream.get_final_message()

        print("\n" + "-" * 50)
        print(f"Stop reason: {final.stop_reason}, complete: {final.complete}")
        print(f"Tokens: {final.usage.input_tokens} in, {final.usage.output_tokens} out")

        # Every event, including in-band errors
        print("\n\nEvent by event:")
        print("-" * 50)

        stream = client.messages.stream(
            model=MODEL,
            max_tokens=100,
            messages=[Message.user("Count from 1 to 5.")],
        )
        async with stream:
            async for event in stream:
                if isinstance(event, ContentBlockDelta) and event.text is not None:
                    print(event.text, end="", flush=True)
                elif isinstance(event, MessageDelta):
                    print(f"\n\n[Stop reason: {event.stop_reason}]")
                elif isinstance(event, StreamError):
                    # Parsing errors are skipped; anything else ends the stream
                    print(f"\n\n[Error {event.kind}: {event.message}]")


if __name__ == "__main__":
    asyncio.run(main())
