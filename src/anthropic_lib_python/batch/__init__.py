"""
Batch processing module.

Provides:
- BatchesResource: Message Batches REST operations
- BatchPoller: Submit and wait for batches with capped exponential backoff
- ChunkedBatchRunner: Split large request lists across several batches
"""

from anthropic_lib_python.batch.backoff import BackoffPolicy
from anthropic_lib_python.batch.chunked import (
    MISSING_RESULT,
    ChunkedBatchOutcome,
    ChunkedBatchRunner,
    ChunkOutcome,
    chunk_custom_id,
    partition,
)
from anthropic_lib_python.batch.poller import BatchPoller
from anthropic_lib_python.batch.resource import BatchesResource, parse_results_jsonl

__all__ = [
    "MISSING_RESULT",
    "BackoffPolicy",
    "BatchPoller",
    "BatchesResource",
    "ChunkOutcome",
    "ChunkedBatchOutcome",
    "ChunkedBatchRunner",
    "chunk_custom_id",
    "parse_results_jsonl",
    "partition",
]
