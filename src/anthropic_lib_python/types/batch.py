"""
Message Batches types.

A batch moves through::

    validating -> in_progress -> {completed | failed | expired | cancelled}

with ``cancelling`` as an observable step on the way to ``cancelled``.
Nothing leaves a terminal state. The wire status names of the Message
Batches API (``ended``, ``canceling``) are accepted as aliases.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from anthropic_lib_python.errors import ValidationError
from anthropic_lib_python.types.message import MessageResponse

MAX_BATCH_REQUESTS = 10_000
_CUSTOM_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


class BatchStatus(str, Enum):
    """Processing status of a batch."""

    VALIDATING = "validating"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    EXPIRED = "expired"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"

    @classmethod
    def _missing_(cls, value: object) -> BatchStatus | None:
        if isinstance(value, str):
            alias = _STATUS_ALIASES.get(value.lower())
            if alias is not None:
                return alias
        return None

    @property
    def is_terminal(self) -> bool:
        """Whether the batch can no longer change state."""
        return self in _TERMINAL_STATUSES

    @property
    def is_active(self) -> bool:
        """Whether the batch is still being processed."""
        return not self.is_terminal


_STATUS_ALIASES: dict[str, BatchStatus] = {
    "ended": BatchStatus.COMPLETED,
    "canceling": BatchStatus.CANCELLING,
    "canceled": BatchStatus.CANCELLED,
    "finalizing": BatchStatus.IN_PROGRESS,
}

_TERMINAL_STATUSES: frozenset[BatchStatus] = frozenset(
    {
        BatchStatus.COMPLETED,
        BatchStatus.FAILED,
        BatchStatus.EXPIRED,
        BatchStatus.CANCELLED,
    }
)


class RequestCounts(BaseModel):
    """Counts of the batch's requests in each processing state."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    processing: int = 0
    succeeded: int = Field(default=0, validation_alias=AliasChoices("succeeded", "completed"))
    errored: int = Field(default=0, validation_alias=AliasChoices("errored", "failed"))
    cancelled: int = Field(default=0, validation_alias=AliasChoices("cancelled", "canceled"))
    expired: int = 0
    total: int | None = None

    @model_validator(mode="after")
    def _fill_total(self) -> RequestCounts:
        if self.total is None:
            self.total = (
                self.processing + self.succeeded + self.errored + self.cancelled + self.expired
            )
        return self

    @property
    def completed_count(self) -> int:
        """Requests that are no longer processing."""
        return self.succeeded + self.errored + self.cancelled + self.expired

    @property
    def all_completed(self) -> bool:
        return self.processing == 0

    @property
    def success_rate(self) -> float:
        """Succeeded / (succeeded + errored), 0.0 when nothing finished."""
        finished = self.succeeded + self.errored
        if finished == 0:
            return 0.0
        return self.succeeded / finished


class Batch(BaseModel):
    """Authoritative snapshot of a batch, as returned by the API."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    type: str = "message_batch"
    status: BatchStatus = Field(validation_alias=AliasChoices("processing_status", "status"))
    request_counts: RequestCounts = Field(default_factory=RequestCounts)
    created_at: datetime | None = None
    expires_at: datetime | None = None
    ended_at: datetime | None = None
    cancel_initiated_at: datetime | None = None
    archived_at: datetime | None = None
    results_url: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return BatchStatus(value)
        return value

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def has_results(self) -> bool:
        """Whether results can be fetched for this batch."""
        return self.is_terminal and self.results_url is not None

    @property
    def progress(self) -> float:
        """Fraction of requests no longer processing (0.0-1.0)."""
        counts = self.request_counts
        if not counts.total:
            return 1.0 if self.is_terminal else 0.0
        return counts.completed_count / counts.total

    @property
    def time_until_expiration(self) -> timedelta | None:
        """Time left before the batch expires, None once terminal."""
        if self.is_terminal or self.expires_at is None:
            return None
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at - datetime.now(timezone.utc)


class BatchPage(BaseModel):
    """One page of ``GET /v1/messages/batches``."""

    data: list[Batch] = Field(default_factory=list)
    has_more: bool = False
    first_id: str | None = None
    last_id: str | None = None

    @property
    def active_batches(self) -> list[Batch]:
        return [b for b in self.data if b.status.is_active]

    @property
    def completed_batches(self) -> list[Batch]:
        return [b for b in self.data if b.is_terminal]


class BatchRequest(BaseModel):
    """A single sub-request of a batch.

    Attributes:
        custom_id: Caller-assigned correlation id, unique within the batch
        params: Message creation parameters (model, messages, max_tokens, ...)
    """

    custom_id: str
    params: dict[str, Any]

    def validate_request(self) -> None:
        """Raise ValidationError if the request cannot be submitted."""
        if not _CUSTOM_ID_PATTERN.match(self.custom_id):
            raise ValidationError(
                "custom_id must be 1-64 characters of letters, digits, '_' or '-'",
                field="custom_id",
                actual=self.custom_id,
            )
        if not self.params:
            raise ValidationError("Batch request params cannot be empty", field="params")

    def to_dict(self) -> dict[str, Any]:
        return {"custom_id": self.custom_id, "params": self.params}


def validate_batch_requests(requests: list[BatchRequest]) -> None:
    """Validate a whole submission: size limits and unique custom ids."""
    if not requests:
        raise ValidationError("Batch requests cannot be empty", field="requests")
    if len(requests) > MAX_BATCH_REQUESTS:
        raise ValidationError(
            f"Batch cannot contain more than {MAX_BATCH_REQUESTS} requests",
            field="requests",
            actual=len(requests),
        )

    seen: set[str] = set()
    for i, request in enumerate(requests):
        request.validate_request()
        if request.custom_id in seen:
            raise ValidationError(
                "Batch requests must have unique custom_id values",
                field=f"requests[{i}].custom_id",
                actual=request.custom_id,
            )
        seen.add(request.custom_id)


class BatchResultType(str, Enum):
    """Outcome of one batch sub-request."""

    SUCCEEDED = "succeeded"
    ERRORED = "errored"
    CANCELED = "canceled"
    EXPIRED = "expired"


class BatchError(BaseModel):
    """Failure payload of a batch sub-request."""

    model_config = ConfigDict(extra="allow")

    type: str
    message: str = ""


class BatchResult(BaseModel):
    """Result of one sub-request, keyed by its ``custom_id``."""

    custom_id: str
    type: BatchResultType
    message: MessageResponse | None = None
    error: BatchError | None = None

    @property
    def is_success(self) -> bool:
        return self.type is BatchResultType.SUCCEEDED

    @classmethod
    def from_wire(cls, payload: dict[str, Any]) -> BatchResult:
        """Build from one results line: ``{"custom_id": ..., "result": {...}}``.

        Errored results come either flat (``{"error": {"type", "message"}}``)
        or wrapped in the API error envelope (``{"error": {"error": {...}}}``).
        A bare string error is kept as the message.

        Raises:
            ValueError: If the line does not have the result shape
        """
        custom_id = payload.get("custom_id")
        if not isinstance(custom_id, str):
            raise ValueError("custom_id must be a string")
        result = payload.get("result")
        if not isinstance(result, dict):
            raise ValueError("result must be an object")
        result_type = BatchResultType(result.get("type"))

        if result_type is BatchResultType.SUCCEEDED:
            message = result.get("message")
            if not isinstance(message, dict):
                raise ValueError("succeeded result must carry a message object")
            return cls(
                custom_id=custom_id,
                type=result_type,
                message=MessageResponse.model_validate(message),
            )

        if result_type is BatchResultType.ERRORED:
            error = result.get("error") or {}
            if isinstance(error, str):
                error = {"message": error}
            elif not isinstance(error, dict):
                raise ValueError("error must be an object")
            if isinstance(error.get("error"), dict):
                error = error["error"]
            return cls(
                custom_id=custom_id,
                type=result_type,
                error=BatchError(
                    type=str(error.get("type") or "error"),
                    message=str(error.get("message") or ""),
                ),
            )

        return cls(
            custom_id=custom_id,
            type=result_type,
            error=BatchError(type=result_type.value, message=f"Request {result_type.value}"),
        )

    @classmethod
    def failure(cls, custom_id: str, kind: str, message: str) -> BatchResult:
        """Synthesize a failed result for a request that never produced one."""
        return cls(
            custom_id=custom_id,
            type=BatchResultType.ERRORED,
            error=BatchError(type=kind, message=message),
        )
