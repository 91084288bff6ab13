"""
Record Schema Definitions for Model Output.

Each target record type (roadmap phase, quiz question, exam question) is a
declarative RecordSchema: canonical field names, alias names in order of
preference, defaults, and the validity rules the normalizer enforces. Adding
a record type is a data change, not a code change.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import CallerInputError


class FieldKind(str, Enum):
    """How a field's raw value is coerced."""

    TEXT = "text"  # Stringified and trimmed
    LIST = "list"  # Ordered list of non-empty strings
    CHOICE = "choice"  # Lower-cased text restricted to FieldSpec.choices


class AnswerPolicy(str, Enum):
    """What to do when the answer is not one of the options."""

    SUBSTITUTE = "substitute"  # Use the first option
    REJECT = "reject"  # Drop the record


class PadPolicy(str, Enum):
    """What to do when fewer valid records survive than requested."""

    PAD = "pad"  # Top up with fallback records
    ACCEPT_SHORT = "accept_short"  # Return the short list


@dataclass(frozen=True)
class FieldSpec:
    """One canonical field and the raw keys it may arrive under."""

    name: str
    kind: FieldKind = FieldKind.TEXT
    aliases: tuple[str, ...] = ()
    default: Any = ""
    choices: tuple[str, ...] = ()

    @property
    def lookup_keys(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)

    def default_value(self) -> Any:
        # Fresh list per record so callers can mutate safely
        return list(self.default) if isinstance(self.default, (list, tuple)) else self.default


@dataclass(frozen=True)
class RecordSchema:
    """Language-agnostic description of one target record type."""

    name: str
    fields: tuple[FieldSpec, ...]
    required: tuple[str, ...] = ()
    options_field: str | None = None
    answer_field: str | None = None
    id_field: str | None = None
    min_options: int = 2
    max_options: int | None = None
    answer_policy: AnswerPolicy | None = None
    pad_policy: PadPolicy = PadPolicy.ACCEPT_SHORT

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    @property
    def all_keys(self) -> frozenset[str]:
        """Every canonical and alias key this schema recognizes."""
        return frozenset(key for spec in self.fields for key in spec.lookup_keys)

    @property
    def is_question(self) -> bool:
        return self.options_field is not None and self.answer_field is not None

    def get_field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)


# =============================================================================
# Shared Field Specs
# =============================================================================

DIFFICULTY_LEVELS = ("easy", "medium", "hard")

QUESTION_TEXT = FieldSpec(
    name="question",
    aliases=("questionText", "question_text", "prompt", "stem", "text"),
)

OPTIONS = FieldSpec(
    name="options",
    kind=FieldKind.LIST,
    aliases=("choices", "answers_list", "alternatives"),
    default=(),
)

ANSWER = FieldSpec(
    name="answer",
    aliases=("correctAnswer", "correct_answer", "correct", "correct_option", "correct_index"),
)


# =============================================================================
# Record Schemas
# =============================================================================

ROADMAP_PHASE = RecordSchema(
    name="roadmap_phase",
    fields=(
        FieldSpec(name="phase", aliases=("name", "title", "stage", "step", "phase_name")),
        FieldSpec(name="description", aliases=("desc", "summary", "details", "overview")),
        FieldSpec(
            name="duration",
            aliases=("timeframe", "time", "estimatedTime", "estimated_time", "timeline"),
        ),
        FieldSpec(
            name="skills",
            kind=FieldKind.LIST,
            aliases=("essential_skills", "key_skills", "skills_to_learn", "topics", "substeps"),
            default=(),
        ),
        FieldSpec(
            name="resources",
            kind=FieldKind.LIST,
            aliases=("links", "learning_resources", "materials", "courses"),
            default=(),
        ),
    ),
    required=("phase",),
)

QUIZ_QUESTION = RecordSchema(
    name="quiz_question",
    fields=(QUESTION_TEXT, OPTIONS, ANSWER),
    required=("question",),
    options_field="options",
    answer_field="answer",
    max_options=4,
    answer_policy=AnswerPolicy.SUBSTITUTE,
    pad_policy=PadPolicy.PAD,
)

EXAM_QUESTION = RecordSchema(
    name="exam_question",
    fields=(
        FieldSpec(name="id", aliases=("_id", "question_id", "questionId")),
        QUESTION_TEXT,
        OPTIONS,
        ANSWER,
        FieldSpec(name="explanation", aliases=("rationale", "reason", "explain")),
        FieldSpec(
            name="difficulty",
            kind=FieldKind.CHOICE,
            aliases=("level",),
            default="medium",
            choices=DIFFICULTY_LEVELS,
        ),
    ),
    required=("question",),
    options_field="options",
    answer_field="answer",
    id_field="id",
    answer_policy=AnswerPolicy.REJECT,
    pad_policy=PadPolicy.ACCEPT_SHORT,
)

SCHEMAS: dict[str, RecordSchema] = {
    "roadmap": ROADMAP_PHASE,
    "roadmap_phase": ROADMAP_PHASE,
    "quiz": QUIZ_QUESTION,
    "quiz_question": QUIZ_QUESTION,
    "exam": EXAM_QUESTION,
    "exam_question": EXAM_QUESTION,
}


def get_schema(schema: RecordSchema | str) -> RecordSchema:
    """Resolve a schema object or name."""
    if isinstance(schema, RecordSchema):
        return schema
    key = str(schema or "").strip().lower().replace("-", "_")
    if key not in SCHEMAS:
        raise CallerInputError(
            f"Unknown schema '{schema}' (expected one of: roadmap, quiz, exam)"
        )
    return SCHEMAS[key]


def list_schemas() -> list[RecordSchema]:
    """Distinct schemas in registration order."""
    seen: list[RecordSchema] = []
    for schema in SCHEMAS.values():
        if schema not in seen:
            seen.append(schema)
    return seen
