"""Tolerant parsing and normalization of LLM output.

Pipeline:
1. Text extraction from heterogeneous provider responses
2. JSON recovery (fences, bracket scan, wrapped fragments, list markers)
3. Shape normalization against declarative record schemas
4. Deterministic fallback when nothing usable was recovered
5. Answer redaction before records leave the system

Usage:
    from src.llm_output import RedactionPolicy, normalize_model_output

    paper = normalize_model_output(response, "exam", {"topic": "Networking", "count": 5})
    for question in paper.records:
        print(question["question"])
"""

from .exceptions import CallerInputError, NormalizationError
from .extraction import CandidateText, extract_text
from .fallback import generate_fallback
from .json_recovery import recover_json
from .normalizer import normalize_record, normalize_records
from .params import GenerationParams
from .pipeline import NormalizedCollection, normalize_model_output, serve_cached_records
from .redaction import RedactionPolicy, redact, resolve_redaction_policy
from .results import FailureReason, PipelineState, StageResult
from .schemas import (
    EXAM_QUESTION,
    QUIZ_QUESTION,
    ROADMAP_PHASE,
    RecordSchema,
    get_schema,
    list_schemas,
)

__all__ = [
    "CallerInputError",
    "NormalizationError",
    "CandidateText",
    "extract_text",
    "recover_json",
    "normalize_record",
    "normalize_records",
    "generate_fallback",
    "GenerationParams",
    "NormalizedCollection",
    "normalize_model_output",
    "serve_cached_records",
    "RedactionPolicy",
    "redact",
    "resolve_redaction_policy",
    "FailureReason",
    "PipelineState",
    "StageResult",
    "RecordSchema",
    "ROADMAP_PHASE",
    "QUIZ_QUESTION",
    "EXAM_QUESTION",
    "get_schema",
    "list_schemas",
]
