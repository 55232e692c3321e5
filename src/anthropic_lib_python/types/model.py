"""
Models API types.

``GET /v1/models`` returns a page of ``ModelInfo`` objects, most recent
first. Capability fields are optional; they are kept when the server
sends them.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ModelInfo(BaseModel):
    """A model available to the API key.

    Attributes:
        id: Model identifier, usable as the ``model`` request parameter
        display_name: Human-readable name
        created_at: Release time
        context_window: Context window size in tokens, if reported
        max_tokens: Output token limit, if reported
        supports_vision: Whether image input is accepted, if reported
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    type: str = "model"
    display_name: str = ""
    created_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("created_at", "created")
    )
    context_window: int | None = None
    max_tokens: int | None = None
    supports_vision: bool | None = None


class ModelPage(BaseModel):
    """One page of ``GET /v1/models``."""

    data: list[ModelInfo] = Field(default_factory=list)
    has_more: bool = False
    first_id: str | None = None
    last_id: str | None = None

    @property
    def ids(self) -> list[str]:
        return [m.id for m in self.data]

    @property
    def vision_capable(self) -> list[ModelInfo]:
        return [m for m in self.data if m.supports_vision]

    @property
    def by_context_window(self) -> list[ModelInfo]:
        """Models with a known context window, largest first."""
        known = [m for m in self.data if m.context_window is not None]
        return sorted(known, key=lambda m: m.context_window, reverse=True)
