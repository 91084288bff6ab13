"""
Shared request models for the generation endpoints.

Bodies carry the model's raw response alongside the request parameters; the
upstream model call happens before these endpoints are invoked.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModelOutputRequest(BaseModel):
    """Fields common to every endpoint that normalizes model output."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    raw_response: Any = Field(
        None,
        alias="rawResponse",
        description="Provider response payload as returned by the AI SDK/REST API",
    )
    raw_text: str | None = Field(
        None,
        alias="rawText",
        description="Model text, when the caller already extracted it",
    )
    count: Any = Field(None, description="Number of items requested")
    difficulty: str | None = Field(None, description="Requested difficulty or level")

    @property
    def model_output(self) -> Any:
        """The raw response when present, else the raw text (possibly empty)."""
        if self.raw_response is not None:
            return self.raw_response
        return self.raw_text or ""

    def params_body(self) -> dict[str, Any]:
        """Request parameters in the loose shape GenerationParams.from_request accepts."""
        return self.model_dump(
            exclude={"raw_response", "raw_text", "cached_records", "admin_secret"},
            exclude_none=True,
        )


class CachedRecordsMixin(BaseModel):
    """Pre-existing records the caller found in its own store."""

    cached_records: list[dict[str, Any]] = Field(
        default_factory=list,
        alias="cachedRecords",
        description="Stored records served instead of the model output when sufficient",
    )
    regenerate: bool = Field(False, description="Ignore cached records")
