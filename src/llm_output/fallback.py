"""
Deterministic fallback records.

Used when no usable records could be recovered from the model, and to pad
quiz collections that came up short. No external calls; identical params
always yield identical records.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from loguru import logger

from .params import GenerationParams
from .schemas import (
    DIFFICULTY_LEVELS,
    EXAM_QUESTION,
    QUIZ_QUESTION,
    ROADMAP_PHASE,
    FieldKind,
    RecordSchema,
)

PLACEHOLDER_OPTIONS = ("Option A", "Option B", "Option C", "Option D")
PLACEHOLDER_ANSWER = PLACEHOLDER_OPTIONS[0]

# Staged learning path used when no roadmap could be recovered
ROADMAP_STAGES: tuple[dict[str, Any], ...] = (
    {
        "phase": "Foundation: {topic} fundamentals",
        "description": "Learn the core vocabulary, concepts and tooling of {topic}.",
        "duration": "4-8 weeks",
        "skills": ["Core terminology", "Fundamental concepts", "Developer tooling basics"],
        "resources": ["Introductory {topic} course", "Official {topic} documentation"],
    },
    {
        "phase": "Core skills: {topic} in practice",
        "description": "Build working knowledge of the techniques used day to day in {topic}.",
        "duration": "6-10 weeks",
        "skills": ["Guided exercises", "Common patterns", "Debugging and troubleshooting"],
        "resources": ["Intermediate {topic} course", "Hands-on {topic} tutorials"],
    },
    {
        "phase": "Applied projects: {topic}",
        "description": "Apply {topic} skills to end-to-end projects.",
        "duration": "6-10 weeks",
        "skills": ["Project planning", "Integration with other systems", "Testing"],
        "resources": ["Open-source {topic} projects", "Project-based {topic} course"],
    },
    {
        "phase": "Deployment & tooling for {topic}",
        "description": "Ship {topic} work to real environments and automate the workflow.",
        "duration": "3-6 weeks",
        "skills": ["Version control workflows", "Deployment basics", "CI pipelines"],
        "resources": ["Cloud fundamentals course", "CI/CD guides"],
    },
    {
        "phase": "Portfolio & interview prep: {topic}",
        "description": "Polish projects and prepare for {topic} interviews.",
        "duration": "2-6 weeks",
        "skills": ["Portfolio projects", "Problem-solving practice", "Mock interviews"],
        "resources": ["Interview preparation guides", "Portfolio review checklist"],
    },
)

# Shorter early stages for learners who already have a head start
LEVEL_DURATIONS: dict[str, dict[int, str]] = {
    "intermediate": {0: "2-4 weeks", 1: "4-8 weeks"},
    "expert": {0: "1-2 weeks", 1: "2-4 weeks", 2: "3-6 weeks"},
}


def exam_difficulty(difficulty: str) -> str:
    """Map a requested difficulty onto the exam enum ('mixed' and unknowns become 'medium')."""
    value = (difficulty or "").strip().lower()
    return value if value in DIFFICULTY_LEVELS else "medium"


def _question_text(params: GenerationParams, number: int) -> str:
    text = f"({params.topic}) Sample question #{number} - difficulty: {params.difficulty}"
    if params.sub_topics:
        text += f" - topics: {params.sub_topics}"
    return text


def _exam_record(params: GenerationParams, index: int) -> dict[str, Any]:
    number = index + 1
    return {
        "id": f"fallback-{params.topic_slug}-{number}",
        "question": _question_text(params, number),
        "options": list(PLACEHOLDER_OPTIONS),
        "answer": PLACEHOLDER_ANSWER,
        "explanation": f"Placeholder question; no generated content was available for {params.topic}.",
        "difficulty": exam_difficulty(params.difficulty),
    }


def _quiz_record(params: GenerationParams, index: int) -> dict[str, Any]:
    number = index + 1
    return {
        "question": f"Placeholder question #{number} about {params.topic} ({params.difficulty})",
        "options": list(PLACEHOLDER_OPTIONS),
        "answer": PLACEHOLDER_ANSWER,
    }


def _roadmap_record(params: GenerationParams, index: int) -> dict[str, Any]:
    stage_index = index % len(ROADMAP_STAGES)
    stage = ROADMAP_STAGES[stage_index]
    level = params.difficulty.strip().lower()
    duration = LEVEL_DURATIONS.get(level, {}).get(stage_index, stage["duration"])

    phase = stage["phase"].format(topic=params.topic)
    if index >= len(ROADMAP_STAGES):
        phase = f"{phase} (round {index // len(ROADMAP_STAGES) + 1})"

    return {
        "phase": phase,
        "description": stage["description"].format(topic=params.topic),
        "duration": duration,
        "skills": list(stage["skills"]),
        "resources": [r.format(topic=params.topic) for r in stage["resources"]],
    }


def _generic_record(schema: RecordSchema, params: GenerationParams, index: int) -> dict[str, Any]:
    """Placeholder built from field defaults, for schemas without a template."""
    number = index + 1
    record: dict[str, Any] = {}
    for spec in schema.fields:
        if spec.name == schema.id_field:
            record[spec.name] = f"fallback-{params.topic_slug}-{number}"
        elif spec.name == schema.options_field:
            record[spec.name] = list(PLACEHOLDER_OPTIONS[:schema.max_options])
        elif spec.name == schema.answer_field:
            record[spec.name] = PLACEHOLDER_ANSWER
        elif spec.name in schema.required and spec.kind != FieldKind.CHOICE:
            text = f"Placeholder {spec.name} #{number} for {params.topic}"
            record[spec.name] = [text] if spec.kind == FieldKind.LIST else text
        else:
            record[spec.name] = spec.default_value()
    return record


FALLBACK_BUILDERS: dict[str, Callable[[GenerationParams, int], dict[str, Any]]] = {
    EXAM_QUESTION.name: _exam_record,
    QUIZ_QUESTION.name: _quiz_record,
    ROADMAP_PHASE.name: _roadmap_record,
}


def generate_fallback(
    schema: RecordSchema,
    params: GenerationParams,
    start: int = 0,
    count: int | None = None,
) -> list[dict[str, Any]]:
    """
    Synthesize placeholder records of the requested shape.

    Args:
        schema: Target record schema
        params: Original request parameters
        start: Index of the first record (offsets numbering when padding)
        count: Number of records (params.count when None)

    Returns:
        Exactly `count` schema-conformant records
    """
    count = params.count if count is None else count
    if count <= 0:
        return []

    builder = FALLBACK_BUILDERS.get(schema.name)
    if builder is None:
        logger.warning(f"No fallback template for {schema.name}, using field defaults")
        records = [_generic_record(schema, params, i) for i in range(start, start + count)]
    else:
        records = [builder(params, i) for i in range(start, start + count)]

    logger.info(f"Generated {count} fallback {schema.name} records for '{params.topic}'")
    return records
