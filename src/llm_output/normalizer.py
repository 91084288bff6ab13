"""
Shape normalization for recovered model output.

Turns a parsed-but-untrusted JSON value into schema-conformant records:
aliases resolved to canonical fields, values coerced, defaults supplied and
structurally invalid records dropped. Order is always preserved.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from .schemas import AnswerPolicy, FieldKind, FieldSpec, RecordSchema

# Keys tried, in order, when a list item is an object rather than a string
ITEM_TEXT_KEYS = ("title", "name", "text", "label", "url")


def is_empty(value: Any) -> bool:
    """None, blank strings and empty containers count as absent."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def resolve_field(raw: Mapping[str, Any], spec: FieldSpec) -> Any:
    """First present, non-empty value among the field's keys, else the default."""
    for key in spec.lookup_keys:
        value = raw.get(key)
        if not is_empty(value):
            return value
    return spec.default_value()


def _stringify_item(item: Any) -> str:
    if isinstance(item, Mapping):
        for key in ITEM_TEXT_KEYS:
            if not is_empty(item.get(key)):
                return str(item[key]).strip()
        return ""
    if item is None:
        return ""
    return str(item).strip()


def coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def coerce_list(value: Any) -> list[str]:
    """Stringify each entry and drop the empty ones; a bare scalar becomes one entry."""
    if is_empty(value):
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]
    items = (_stringify_item(item) for item in value)
    return [item for item in items if item]


def coerce_choice(value: Any, spec: FieldSpec) -> str:
    text = coerce_text(value).lower()
    return text if text in spec.choices else spec.default


def coerce_field(value: Any, spec: FieldSpec) -> Any:
    if spec.kind == FieldKind.LIST:
        return coerce_list(value)
    if spec.kind == FieldKind.CHOICE:
        return coerce_choice(value, spec)
    return coerce_text(value)


def _items_from_value(value: Any, schema: RecordSchema) -> list:
    """
    Coerce the recovered value to a list of candidate records.

    An object that nests a list of schema-shaped objects under a key the
    schema does not own, e.g. {"topic": ..., "questions": [...]}, is a wrapper
    and that list is used. Any other object is one record.
    """
    if isinstance(value, list):
        return value
    if isinstance(value, Mapping):
        for key, nested in value.items():
            if key in schema.all_keys or not isinstance(nested, list):
                continue
            if any(isinstance(item, Mapping) and schema.all_keys & set(item.keys()) for item in nested):
                return nested
        return [value]
    return []


def _resolve_answer(raw_answer: Any, options: list[str]) -> str:
    # Integer answers are option indexes (bool is an int subclass, skip it)
    if isinstance(raw_answer, int) and not isinstance(raw_answer, bool):
        if 0 <= raw_answer < len(options):
            return options[raw_answer]
    return coerce_text(raw_answer)


def normalize_record(
    raw: Any,
    schema: RecordSchema,
    position: int = 0,
    id_prefix: str = "ai",
    max_options: int | None = None,
) -> dict[str, Any] | None:
    """
    Normalize one candidate record.

    Args:
        raw: Candidate record from the recovered JSON
        schema: Target record schema
        position: 0-based index in the source array (used for synthesized ids)
        id_prefix: Prefix for synthesized ids
        max_options: Option cap overriding schema.max_options

    Returns:
        Canonical record dict, or None when the record is structurally invalid
    """
    if not isinstance(raw, Mapping):
        return None

    record: dict[str, Any] = {}
    raw_answer: Any = None
    for spec in schema.fields:
        value = resolve_field(raw, spec)
        if spec.name == schema.answer_field:
            raw_answer = value
            continue
        record[spec.name] = coerce_field(value, spec)

    for name in schema.required:
        if is_empty(record.get(name)):
            return None

    if schema.id_field and not record.get(schema.id_field):
        record[schema.id_field] = f"{id_prefix}-{position + 1}"

    if not schema.is_question:
        return record

    options = record[schema.options_field]
    cap = max_options or schema.max_options
    if cap:
        options = options[:cap]
        record[schema.options_field] = options
    if len(options) < schema.min_options:
        return None

    answer = _resolve_answer(raw_answer, options)
    if answer not in options:
        if schema.answer_policy == AnswerPolicy.SUBSTITUTE:
            answer = options[0]
        else:
            return None

    # Keep canonical field order
    return {spec.name: (answer if spec.name == schema.answer_field else record[spec.name])
            for spec in schema.fields}


def normalize_records(
    value: Any,
    schema: RecordSchema,
    count: int | None = None,
    id_prefix: str = "ai",
    max_options: int | None = None,
) -> list[dict[str, Any]]:
    """
    Normalize a recovered JSON value into at most `count` valid records.

    Never raises; invalid records are dropped without aborting the rest.
    """
    items = _items_from_value(value, schema)
    records = []
    dropped = 0
    for position, item in enumerate(items):
        record = normalize_record(item, schema, position, id_prefix, max_options)
        if record is None:
            dropped += 1
            continue
        records.append(record)

    if dropped:
        logger.debug(f"Dropped {dropped}/{len(items)} invalid {schema.name} records")

    if count is not None:
        records = records[:count]
    return records
