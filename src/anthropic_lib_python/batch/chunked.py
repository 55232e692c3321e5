"""
Chunked batch submission.

Splits a large list of requests into ordered chunks, runs each chunk as
its own batch and merges the results back into input order. A failed
chunk marks its own requests as failed and processing moves on to the
next chunk.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from anthropic_lib_python.errors import AnthropicLibError
from anthropic_lib_python.telemetry import get_logger
from anthropic_lib_python.types.batch import BatchRequest, BatchResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from anthropic_lib_python.batch.poller import BatchPoller, StatusCallback

T = TypeVar("T")

logger = get_logger("anthropic_lib_python.batch")

MISSING_RESULT = "missing_result"


def partition(items: Sequence[T], size: int) -> list[list[T]]:
    """Split ``items`` into consecutive chunks of at most ``size``."""
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def chunk_custom_id(chunk_index: int, request_index: int) -> str:
    """Correlation id of request ``request_index`` within chunk ``chunk_index``."""
    return f"chunk{chunk_index}_req{request_index}"


@dataclass
class ChunkOutcome:
    """What happened to one chunk.

    Attributes:
        index: Chunk position (0-based)
        size: Number of requests in the chunk
        batch_id: Batch id, if the chunk was submitted
        error: Error that failed the whole chunk, if any
    """

    index: int
    size: int
    batch_id: str | None = None
    error: AnthropicLibError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ChunkedBatchOutcome:
    """Aggregated results of a chunked run.

    Attributes:
        results: One result per input request, in input order
        chunks: Per-chunk outcome, in submission order
        total_time_ms: Wall time of the whole run
    """

    results: list[BatchResult] = field(default_factory=list)
    chunks: list[ChunkOutcome] = field(default_factory=list)
    total_time_ms: float = 0.0

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.is_success)

    @property
    def failed(self) -> int:
        return len(self.results) - self.succeeded

    @property
    def success_rate(self) -> float:
        if not self.results:
            return 0.0
        return self.succeeded / len(self.results)

    @property
    def failed_chunks(self) -> list[ChunkOutcome]:
        return [c for c in self.chunks if not c.ok]


class ChunkedBatchRunner:
    """Runs more requests than fit one batch, chunk by chunk.

    Example:
        >>> runner = ChunkedBatchRunner(poller, chunk_size=10)
        >>> outcome = await runner.run([{"model": ..., "max_tokens": 64, "messages": [...]}] * 25)
        >>> print(outcome.succeeded, "/", len(outcome.results))
    """

    def __init__(self, poller: BatchPoller, chunk_size: int = 10) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        self._poller = poller
        self._chunk_size = chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    async def run(
        self,
        params_list: Sequence[dict[str, Any]],
        on_status: StatusCallback | None = None,
    ) -> ChunkedBatchOutcome:
        """Submit every chunk in turn and aggregate the results.

        Args:
            params_list: Message creation parameters, one per request
            on_status: Forwarded to ``wait_for_completion`` for each chunk

        Returns:
            Outcome with exactly one result per input, in input order
        """
        start_time = time.time()
        outcome = ChunkedBatchOutcome()

        for chunk_index, chunk in enumerate(partition(params_list, self._chunk_size)):
            requests = [
                BatchRequest(custom_id=chunk_custom_id(chunk_index, i), params=params)
                for i, params in enumerate(chunk)
            ]
            chunk_outcome = ChunkOutcome(index=chunk_index, size=len(requests))
            outcome.chunks.append(chunk_outcome)

            try:
                batch = await self._poller.submit(requests)
                chunk_outcome.batch_id = batch.id
                logger.info(
                    "Submitted chunk", chunk=chunk_index, batch_id=batch.id, size=len(requests)
                )
                results = await self._poller.wait_for_completion(batch.id, on_status=on_status)
            except AnthropicLibError as e:
                logger.warning(
                    "Chunk failed", chunk=chunk_index, kind=e.kind, error=e.message
                )
                chunk_outcome.error = e
                outcome.results.extend(
                    BatchResult.failure(r.custom_id, e.kind, e.message) for r in requests
                )
                continue

            by_id = {r.custom_id: r for r in results}
            for request in requests:
                result = by_id.get(request.custom_id)
                if result is None:
                    result = BatchResult.failure(
                        request.custom_id, MISSING_RESULT, "No result returned for request"
                    )
                outcome.results.append(result)

        outcome.total_time_ms = (time.time() - start_time) * 1000
        logger.info(
            "Chunked batch run finished",
            chunks=len(outcome.chunks),
            succeeded=outcome.succeeded,
            failed=outcome.failed,
        )
        return outcome
