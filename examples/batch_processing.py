#!/usr/bin/env python3
"""
Message batch example.

This example submits 25 prompts as three batches of at most 10 requests,
polls each batch with exponential backoff and prints the aggregated
results.

Usage:
    export ANTHROPIC_API_KEY="your-api-key"
    python examples/batch_processing.py
"""

import asyncio

from anthropic_lib_python import AnthropicClient, Batch, Message
from anthropic_lib_python.telemetry import LibLogger, LogLevel

MODEL = "claude-haiku-4-5"


def report(batch: Batch) -> None:
    counts = batch.request_counts
    print(f"  {batch.id}: {batch.status.value} ({counts.completed_count}/{counts.total})")


async def main() -> None:
    """Run chunked batch example."""
    LibLogger.configure(level=LogLevel.INFO)

    params_list = [
        {
            "model": MODEL,
            "max_tokens": 50,
            "messages": [Message.user(f"Give one fun fact about the number {n}.")],
        }
        for n in range(1, 26)
    ]

    async with AnthropicClient() as client:
        runner = client.chunked_batches(chunk_size=10)
        outcome = await runner.run(params_list, on_status=report)

    print(f"\nSucceeded: {outcome.succeeded}, failed: {outcome.failed}")
    print(f"Success rate: {outcome.success_rate:.0%} in {outcome.total_time_ms / 1000:.1f}s")

    for chunk in outcome.failed_chunks:
        print(f"Chunk {chunk.index} failed: {chunk.error}")

    for n, result in enumerate(outcome.results[:3], start=1):
        if result.is_success and result.message is not None:
            print(f"{n}: {result.message.text}")
        elif result.error is not None:
            print(f"{n}: error {result.error.type}: {result.error.message}")


if __name__ == "__main__":
    asyncio.run(main())
