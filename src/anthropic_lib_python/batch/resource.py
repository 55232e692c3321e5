"""
Message Batches REST resource.

Thin typed wrapper over the ``/v1/messages/batches`` endpoints. Every call
issues a fresh request; no batch state is kept between calls.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pydantic

from anthropic_lib_python.errors import ErrorContext, ParsingError
from anthropic_lib_python.telemetry import get_logger
from anthropic_lib_python.transport.base import RequestDescriptor
from anthropic_lib_python.types.batch import (
    Batch,
    BatchPage,
    BatchRequest,
    BatchResult,
    validate_batch_requests,
)
from anthropic_lib_python.types.events import PARSING_ERROR

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

    from anthropic_lib_python.transport.base import Transport

logger = get_logger("anthropic_lib_python.batch")

BATCHES_PATH = "/v1/messages/batches"


def _to_request(item: BatchRequest | dict[str, Any]) -> BatchRequest:
    if isinstance(item, BatchRequest):
        return item
    return BatchRequest.model_validate(item)


def _json_body(response: httpx.Response, what: str) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as e:
        raise ParsingError(
            f"Invalid JSON in {what} response",
            ErrorContext(source="batch", details={"status_code": response.status_code}),
            payload=response.text[:200],
        ) from e
    if not isinstance(body, dict):
        raise ParsingError(f"Expected a JSON object in {what} response", payload=response.text[:200])
    return body


def _parse_batch(body: dict[str, Any]) -> Batch:
    try:
        return Batch.model_validate(body)
    except (pydantic.ValidationError, ValueError) as e:
        raise ParsingError(f"Malformed batch object: {e}", payload=json.dumps(body)[:200]) from e


def _parse_result(payload: Any) -> BatchResult:
    if not isinstance(payload, dict):
        raise ParsingError("Batch result is not a JSON object", payload=str(payload)[:200])
    try:
        return BatchResult.from_wire(payload)
    except (pydantic.ValidationError, KeyError, TypeError, ValueError) as e:
        raise ParsingError(f"Malformed batch result: {e}", payload=json.dumps(payload)[:200]) from e


def _recover_result(payload: Any) -> BatchResult:
    """Parse one result, turning a malformed one into a ``parsing_error`` failure.

    Only results whose ``custom_id`` is readable can be recovered; the
    others raise ParsingError.
    """
    try:
        return _parse_result(payload)
    except ParsingError as e:
        custom_id = payload.get("custom_id") if isinstance(payload, dict) else None
        if not isinstance(custom_id, str) or not custom_id:
            raise
        logger.warning("Malformed batch result", custom_id=custom_id, error=e.message)
        return BatchResult.failure(custom_id, PARSING_ERROR, e.message)


def parse_results_jsonl(text: str) -> list[BatchResult]:
    """Parse a JSONL results body, one result object per line.

    A line that is valid JSON but not a valid result becomes a failed
    result of kind ``parsing_error``. A line that is not JSON, or has no
    readable ``custom_id``, raises ParsingError.
    """
    results: list[BatchResult] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as e:
            raise ParsingError(
                f"Invalid JSON on results line {line_number}",
                ErrorContext(source="batch", field_path=f"line {line_number}"),
                payload=line[:200],
            ) from e
        results.append(_recover_result(payload))
    return results


class BatchesResource:
    """Message Batches API operations.

    Example:
        >>> batches = BatchesResource(transport)
        >>> batch = await batches.create([BatchRequest(custom_id="a", params={...})])
        >>> batch = await batches.retrieve(batch.id)
        >>> if batch.has_results:
        ...     results = await batches.results(batch.id)
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def create(
        self,
        requests: Sequence[BatchRequest | dict[str, Any]],
        metadata: dict[str, Any] | None = None,
    ) -> Batch:
        """Submit a new batch.

        Raises:
            ValidationError: If the requests are empty, too many or not unique
        """
        batch_requests = [_to_request(r) for r in requests]
        validate_batch_requests(batch_requests)

        body: dict[str, Any] = {"requests": [r.to_dict() for r in batch_requests]}
        if metadata:
            body["metadata"] = metadata

        response = await self._transport.send(RequestDescriptor.post(BATCHES_PATH, body))
        batch = _parse_batch(_json_body(response, "create batch"))
        logger.info("Batch created", batch_id=batch.id, requests=len(batch_requests))
        return batch

    async def retrieve(self, batch_id: str) -> Batch:
        """Fetch the current state of a batch."""
        response = await self._transport.send(RequestDescriptor.get(f"{BATCHES_PATH}/{batch_id}"))
        return _parse_batch(_json_body(response, "retrieve batch"))

    async def cancel(self, batch_id: str) -> Batch:
        """Request cancellation. The batch moves through ``cancelling``."""
        response = await self._transport.send(
            RequestDescriptor.post(f"{BATCHES_PATH}/{batch_id}/cancel")
        )
        batch = _parse_batch(_json_body(response, "cancel batch"))
        logger.info("Batch cancel requested", batch_id=batch_id, status=batch.status.value)
        return batch

    async def list(
        self,
        limit: int = 20,
        before_id: str | None = None,
        after_id: str | None = None,
    ) -> BatchPage:
        """List batches, most recent first."""
        params: dict[str, Any] = {"limit": limit}
        if before_id:
            params["before_id"] = before_id
        if after_id:
            params["after_id"] = after_id

        response = await self._transport.send(RequestDescriptor.get(BATCHES_PATH, params))
        try:
            return BatchPage.model_validate(_json_body(response, "list batches"))
        except pydantic.ValidationError as e:
            raise ParsingError(f"Malformed batch list: {e}") from e

    async def results(self, batch_id: str) -> list[BatchResult]:
        """Fetch every result of a batch.

        The results endpoint streams JSONL. A paginated JSON page
        (``data`` / ``has_more`` / ``last_id``) is also accepted and
        followed to the end.
        """
        path = f"{BATCHES_PATH}/{batch_id}/results"
        results: list[BatchResult] = []
        params: dict[str, Any] | None = None

        while True:
            response = await self._transport.send(RequestDescriptor.get(path, params))
            page = _as_page(response.text)
            if page is None:
                results.extend(parse_results_jsonl(response.text))
                break

            results.extend(_recover_result(item) for item in page.get("data") or [])
            last_id = page.get("last_id")
            if not page.get("has_more") or not last_id:
                break
            params = {"after_id": last_id}

        logger.debug("Fetched batch results", batch_id=batch_id, count=len(results))
        return results


def _as_page(text: str) -> dict[str, Any] | None:
    """Return the body as a results page, or None if it is JSONL."""
    stripped = text.strip()
    if not stripped.startswith("{"):
        return None
    try:
        body = json.loads(stripped)
    except json.JSONDecodeError:
        # Several JSON objects, one per line
        return None
    if isinstance(body, dict) and isinstance(body.get("data"), list):
        return body
    return None
