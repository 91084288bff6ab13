"""
Stage results for the normalization pipeline.

Each stage reports either a value or a tagged failure reason instead of
raising, so "always recovers" is something tests can assert on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FailureReason(str, Enum):
    """Why a pipeline stage produced nothing usable."""

    EXTRACTION_FAILED = "extraction_failed"  # No text located in the raw response
    NO_JSON_FOUND = "no_json_found"  # No JSON array/object recovered from the text
    NO_VALID_RECORDS = "no_valid_records"  # Every record failed its schema predicate
    INSUFFICIENT_COUNT = "insufficient_count"  # Fewer valid records than requested


class PipelineState(str, Enum):
    """Request-level states of the normalization pipeline."""

    RECEIVED = "received"
    EXTRACTING = "extracting"
    RECOVERING_JSON = "recovering_json"
    NORMALIZING = "normalizing"
    SUFFICIENT = "sufficient"
    INSUFFICIENT = "insufficient"
    FALLBACK = "fallback"
    REDACTING = "redacting"
    DONE = "done"


@dataclass(frozen=True)
class StageResult:
    """Outcome of one pipeline stage."""

    value: Any = None
    reason: FailureReason | None = None
    detail: str | None = None  # Strategy that produced the value, or failure context

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls, value: Any, detail: str | None = None) -> StageResult:
        return cls(value=value, detail=detail)

    @classmethod
    def failure(cls, reason: FailureReason, detail: str | None = None) -> StageResult:
        return cls(reason=reason, detail=detail)
