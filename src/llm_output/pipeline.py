"""
Model Output Normalization Pipeline.

raw provider response -> text extraction -> JSON recovery -> shape
normalization -> (fallback when short) -> answer redaction -> caller.

Every stage is a pure function of its input, so the whole pipeline is
idempotent for a given raw response. Only CallerInputError escapes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from config import get_settings

from .extraction import extract_text
from .fallback import generate_fallback
from .json_recovery import recover_json
from .normalizer import normalize_records
from .params import GenerationParams
from .redaction import RedactionPolicy, redact
from .results import FailureReason, PipelineState
from .schemas import PadPolicy, RecordSchema, get_schema

SOURCE_AI = "ai"
SOURCE_DB = "db"
SOURCE_FALLBACK = "fallback"


@dataclass
class NormalizedCollection:
    """Records ready to cross the system boundary, plus how they were produced."""

    schema_name: str
    records: list[dict[str, Any]]
    source: str
    requested: int
    padded: int = 0
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    failures: list[FailureReason] = field(default_factory=list)
    states: list[PipelineState] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def is_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK

    def meta(self, params: GenerationParams | None = None) -> dict[str, Any]:
        """Response metadata with an accurate record count."""
        meta = {
            "count": self.count,
            "requested": self.requested,
            "source": self.source,
            "padded": self.padded,
        }
        if params is not None:
            meta["topic"] = params.topic
        return meta


class _Run:
    """Tracks state transitions and failures for one request."""

    def __init__(self, schema: RecordSchema, params: GenerationParams):
        self.schema = schema
        self.params = params
        self.states: list[PipelineState] = []
        self.failures: list[FailureReason] = []
        self.enter(PipelineState.RECEIVED)

    def enter(self, state: PipelineState) -> None:
        self.states.append(state)
        logger.debug(f"[{self.schema.name}:{self.params.topic_slug}] -> {state.value}")

    def fail(self, reason: FailureReason) -> None:
        self.failures.append(reason)


def _coerce_params(params: GenerationParams | Mapping[str, Any]) -> GenerationParams:
    if isinstance(params, GenerationParams):
        return params
    return GenerationParams.from_request(params)


def _option_cap(schema: RecordSchema) -> int | None:
    return get_settings().quiz_max_options if schema.max_options else None


def _finish(
    run: _Run,
    records: list[dict[str, Any]],
    source: str,
    redaction: RedactionPolicy,
    padded: int = 0,
) -> NormalizedCollection:
    run.enter(PipelineState.REDACTING)
    safe_records = redact(records, redaction, run.schema)
    run.enter(PipelineState.DONE)
    return NormalizedCollection(
        schema_name=run.schema.name,
        records=safe_records,
        source=source,
        requested=run.params.count,
        padded=padded,
        failures=run.failures,
        states=run.states,
    )


def normalize_model_output(
    raw: Any,
    schema: RecordSchema | str,
    params: GenerationParams | Mapping[str, Any],
    redaction: RedactionPolicy | None = None,
) -> NormalizedCollection:
    """
    Turn a raw model response into a validated, redacted record collection.

    Args:
        raw: Provider response object/mapping, or the raw text itself (None is empty text)
        schema: RecordSchema or its name ("roadmap", "quiz", "exam")
        params: GenerationParams or a request body mapping
        redaction: Answer disclosure policy (answers hidden when None)

    Returns:
        NormalizedCollection. Quiz collections always hold exactly params.count
        records; other schemas hold up to params.count, and never zero.

    Raises:
        CallerInputError: Malformed request (topic, count, schema)
    """
    schema = get_schema(schema)
    params = _coerce_params(params)
    redaction = redaction or RedactionPolicy()
    run = _Run(schema, params)

    run.enter(PipelineState.EXTRACTING)
    candidate = extract_text(raw)
    if not candidate.ok:
        run.fail(FailureReason.EXTRACTION_FAILED)

    run.enter(PipelineState.RECOVERING_JSON)
    recovered = recover_json(candidate.text)

    records: list[dict[str, Any]] = []
    if recovered.ok:
        run.enter(PipelineState.NORMALIZING)
        records = normalize_records(
            recovered.value,
            schema,
            params.count,
            id_prefix=f"ai-{params.topic_slug}",
            max_options=_option_cap(schema),
        )
        if not records:
            run.fail(FailureReason.NO_VALID_RECORDS)
    else:
        run.fail(recovered.reason)

    if not records:
        run.enter(PipelineState.INSUFFICIENT)
        run.enter(PipelineState.FALLBACK)
        logger.warning(
            f"No usable {schema.name} records from model output "
            f"(text via {candidate.source}), serving fallback"
        )
        return _finish(run, generate_fallback(schema, params), SOURCE_FALLBACK, redaction)

    if len(records) < params.count:
        run.fail(FailureReason.INSUFFICIENT_COUNT)
        run.enter(PipelineState.INSUFFICIENT)
        if schema.pad_policy == PadPolicy.PAD:
            run.enter(PipelineState.FALLBACK)
            missing = params.count - len(records)
            records = records + generate_fallback(schema, params, start=len(records), count=missing)
            logger.info(f"Padded {schema.name} collection with {missing} placeholder records")
            return _finish(run, records, SOURCE_AI, redaction, padded=missing)
        logger.info(f"Returning {len(records)}/{params.count} {schema.name} records")
        return _finish(run, records, SOURCE_AI, redaction)

    run.enter(PipelineState.SUFFICIENT)
    logger.debug(f"Normalized {len(records)} {schema.name} records via {recovered.detail}")
    return _finish(run, records, SOURCE_AI, redaction)


def serve_cached_records(
    records: Iterable[Mapping[str, Any]] | None,
    schema: RecordSchema | str,
    params: GenerationParams | Mapping[str, Any],
    redaction: RedactionPolicy | None = None,
) -> NormalizedCollection | None:
    """
    Serve pre-existing records (e.g. a database hit) without extraction or recovery.

    Records are normalized so stored field names (questionText, correctAnswer)
    resolve to canonical ones, then redacted like every other path.

    Returns:
        Collection with source "db" when at least params.count valid records
        exist, otherwise None so the caller generates fresh content
    """
    schema = get_schema(schema)
    params = _coerce_params(params)
    redaction = redaction or RedactionPolicy()

    valid = normalize_records(
        list(records or []),
        schema,
        params.count,
        id_prefix=f"db-{params.topic_slug}",
        max_options=_option_cap(schema),
    )
    if len(valid) < params.count:
        logger.debug(f"Cache holds {len(valid)}/{params.count} {schema.name} records, skipping")
        return None

    run = _Run(schema, params)
    run.enter(PipelineState.SUFFICIENT)
    return _finish(run, valid, SOURCE_DB, redaction)
