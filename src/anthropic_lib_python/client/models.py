"""
Models resource: ``GET /v1/models`` and ``GET /v1/models/{model_id}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pydantic

from anthropic_lib_python.errors import ParsingError, ValidationError
from anthropic_lib_python.transport.base import RequestDescriptor
from anthropic_lib_python.types.model import ModelInfo, ModelPage

if TYPE_CHECKING:
    import httpx

    from anthropic_lib_python.transport.base import Transport

MODELS_PATH = "/v1/models"


def _parse(model: type[pydantic.BaseModel], response: httpx.Response, what: str) -> Any:
    try:
        return model.model_validate(response.json())
    except (ValueError, pydantic.ValidationError) as e:
        raise ParsingError(f"Malformed {what} response: {e}", payload=response.text[:200]) from e


class Models:
    """Models API operations.

    Example:
        >>> page = await client.models.list(limit=5)
        >>> print(page.ids)
        >>> info = await client.models.retrieve("claude-sonnet-4-5")
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def list(
        self,
        limit: int = 20,
        before_id: str | None = None,
        after_id: str | None = None,
    ) -> ModelPage:
        """List available models, most recent first."""
        if not 1 <= limit <= 1000:
            raise ValidationError("limit must be between 1 and 1000", field="limit", actual=limit)
        params: dict[str, Any] = {"limit": limit}
        if before_id:
            params["before_id"] = before_id
        if after_id:
            params["after_id"] = after_id

        response = await self._transport.send(RequestDescriptor.get(MODELS_PATH, params))
        return _parse(ModelPage, response, "model list")

    async def retrieve(self, model_id: str) -> ModelInfo:
        """Fetch one model by id or alias.

        Raises:
            ValidationError: If ``model_id`` is empty
            RemoteError: With kind ``not_found_error`` for unknown models
        """
        if not model_id:
            raise ValidationError("model_id cannot be empty", field="model_id")
        response = await self._transport.send(RequestDescriptor.get(f"{MODELS_PATH}/{model_id}"))
        return _parse(ModelInfo, response, "model")
