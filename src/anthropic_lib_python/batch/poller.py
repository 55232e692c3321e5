"""批处理轮询器：提交批处理任务并以指数退避轮询直至终态。

Batch poller.

Drives a submitted batch to a terminal state and returns its results:

1. Fetch the current batch state
2. Report it to the caller (``on_status``)
3. Terminal: fetch and return results, or raise
4. Not terminal: sleep for the next backoff interval and go back to 1

The poller keeps no batch state between calls. Each poll fetches fresh
state, and each ``wait_for_completion`` call starts a new backoff sequence.
Overall timeouts are left to the caller (``asyncio.timeout`` /
``asyncio.wait_for``).
"""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, Any, Union

from anthropic_lib_python.batch.backoff import BackoffPolicy
from anthropic_lib_python.batch.resource import BatchesResource
from anthropic_lib_python.errors import BatchTerminalError, NoResultsError
from anthropic_lib_python.telemetry import get_logger
from anthropic_lib_python.types.batch import BatchStatus

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from anthropic_lib_python.transport.base import Transport
    from anthropic_lib_python.types.batch import Batch, BatchRequest, BatchResult

    StatusCallback = Callable[[Batch], Union[None, Awaitable[None]]]

logger = get_logger("anthropic_lib_python.batch")

_FAILED_STATES = frozenset({BatchStatus.FAILED, BatchStatus.EXPIRED})


class BatchPoller:
    """Submits batches and waits for them to finish.

    Example:
        >>> poller = BatchPoller(transport)
        >>> batch = await poller.submit(requests)
        >>> results = await poller.wait_for_completion(
        ...     batch.id,
        ...     on_status=lambda b: print(b.request_counts.succeeded, "/", b.request_counts.total),
        ... )
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        resource: BatchesResource | None = None,
        backoff: BackoffPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        """Initialize the poller.

        Args:
            transport: Transport used to build a ``BatchesResource``
            resource: Batches resource to use instead of ``transport``
            backoff: Interval policy between polls
            sleep: Async sleep function (defaults to ``asyncio.sleep``)
        """
        if resource is None:
            if transport is None:
                raise ValueError("BatchPoller needs a transport or a resource")
            resource = BatchesResource(transport)
        self._resource = resource
        self._backoff = backoff or BackoffPolicy()
        self._sleep = sleep or asyncio.sleep

    @property
    def resource(self) -> BatchesResource:
        return self._resource

    @property
    def backoff(self) -> BackoffPolicy:
        return self._backoff

    async def submit(
        self,
        requests: Sequence[BatchRequest | dict[str, Any]],
        metadata: dict[str, Any] | None = None,
    ) -> Batch:
        """Submit a batch and return its handle."""
        return await self._resource.create(requests, metadata=metadata)

    async def poll_once(self, batch_id: str) -> Batch:
        """Fetch the current, authoritative state of a batch."""
        return await self._resource.retrieve(batch_id)

    async def cancel(self, batch_id: str) -> Batch:
        return await self._resource.cancel(batch_id)

    async def wait_for_completion(
        self,
        batch_id: str,
        on_status: StatusCallback | None = None,
    ) -> list[BatchResult]:
        """Poll until the batch is terminal, then return its results.

        Args:
            batch_id: Batch to wait for
            on_status: Called with every fetched batch state, before the
                terminal check. May be sync or async.

        Returns:
            All results of the batch

        Raises:
            BatchTerminalError: Batch failed or expired without results
            NoResultsError: Batch is terminal but exposes no results
            TransportError: On network failure (not retried)
            RemoteError: On API errors (not retried)
        """
        intervals = self._backoff.intervals()
        polls = 0

        while True:
            batch = await self.poll_once(batch_id)
            polls += 1
            counts = batch.request_counts
            logger.info(
                "Polled batch",
                batch_id=batch_id,
                status=batch.status.value,
                succeeded=counts.succeeded,
                errored=counts.errored,
                processing=counts.processing,
                total=counts.total,
            )

            if on_status is not None:
                outcome = on_status(batch)
                if inspect.isawaitable(outcome):
                    await outcome

            if batch.is_terminal:
                return await self._finish(batch, polls)

            interval = next(intervals)
            logger.debug("Batch not finished, sleeping", batch_id=batch_id, seconds=interval)
            await self._sleep(interval)

    async def _finish(self, batch: Batch, polls: int) -> list[BatchResult]:
        if batch.has_results:
            results = await self._resource.results(batch.id)
            logger.info(
                "Batch finished",
                batch_id=batch.id,
                status=batch.status.value,
                results=len(results),
                polls=polls,
            )
            return results

        if batch.status in _FAILED_STATES:
            raise BatchTerminalError(batch.id, batch.status.value)
        raise NoResultsError(batch.id, batch.status.value)
