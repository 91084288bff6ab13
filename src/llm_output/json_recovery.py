"""
JSON recovery from model output.

Models wrap JSON in code fences, preface it with prose, or trail it with
chatter. Recovery tries progressively looser ways of *locating* one JSON
array or object in the text. The grammar itself is never relaxed: every
candidate goes through json.loads as-is.

Strategies, first success wins:
1. Fenced block (```json ... ```)
2. Incremental bracket scan from the first '[' or '{'
3. Whole-string parse
4. Wrapped-array heuristic ({"maybe": <fragment>})
5. Strip list markers from every line, then retry 1-3 once
"""

from __future__ import annotations

import json
import re
from typing import Any

from loguru import logger

from config import get_settings

from .results import FailureReason, StageResult

FENCE_LANG_PATTERN = re.compile(r"```[ \t]*json\b", re.IGNORECASE)
FENCE_BLOCK_PATTERN = re.compile(r"```\s*([\s\S]*?)```")
LIST_MARKER_PATTERN = re.compile(r"^[ \t]*(?:\d+[.)]|[-*+•‣◦])[ \t]+", re.MULTILINE)

OPENING_BRACKETS = "[{"
CLOSING_BRACKETS = "]}"


def _loads_container(candidate: str) -> list | dict | None:
    """Parse candidate as exact JSON, accepting only arrays and objects."""
    try:
        value = json.loads(candidate)
    except (json.JSONDecodeError, ValueError, RecursionError):
        return None
    if isinstance(value, (list, dict)):
        return value
    return None


def _normalize_fences(text: str) -> str:
    return FENCE_LANG_PATTERN.sub("```", text)


def clean_text(text: str) -> str:
    """Drop BOM and fence markers, leaving the text between them."""
    cleaned = _normalize_fences(text.lstrip("\ufeff"))
    return cleaned.replace("```", "").strip()


def _first_opening_bracket(text: str) -> int:
    positions = [pos for pos in (text.find(b) for b in OPENING_BRACKETS) if pos != -1]
    return min(positions) if positions else -1


def parse_fenced_block(text: str) -> list | dict | None:
    """Parse the interior of the first fenced block."""
    match = FENCE_BLOCK_PATTERN.search(_normalize_fences(text))
    if not match:
        return None
    return _loads_container(match.group(1).strip())


def scan_brackets(text: str, max_chars: int | None = None) -> list | dict | None:
    """
    Grow a candidate from the first '[' or '{' until it parses.

    Stops at the first successful parse, so trailing prose is ignored. Only
    prefixes ending in a closing bracket can be complete arrays or objects,
    so the others are skipped without calling the parser.
    """
    start = _first_opening_bracket(text)
    if start == -1:
        return None

    limit = max_chars if max_chars is not None else get_settings().json_scan_max_chars
    end_bound = min(len(text), start + limit)

    for end in range(start + 1, end_bound + 1):
        if text[end - 1] not in CLOSING_BRACKETS:
            continue
        value = _loads_container(text[start:end])
        if value is not None:
            return value
    return None


def parse_wrapped_array(text: str) -> list | None:
    """
    Recover a bare array fragment embedded in prose.

    The fragment between the first opening and last closing bracket is
    wrapped in a synthetic {"maybe": ...} envelope, first as-is and then as
    array items, so "{...}, {...}" without enclosing brackets also parses.
    """
    start = _first_opening_bracket(text)
    end = max(text.rfind(b) for b in CLOSING_BRACKETS)
    if start == -1 or end < start:
        return None

    fragment = text[start:end + 1]
    for envelope in ('{"maybe": %s}', '{"maybe": [%s]}'):
        wrapped = _loads_container(envelope % fragment)
        if wrapped is not None and isinstance(wrapped.get("maybe"), list):
            return wrapped["maybe"]
    return None


def strip_list_markers(text: str) -> str:
    """Remove leading numbering, dashes and bullets from every line."""
    return LIST_MARKER_PATTERN.sub("", text)


def _try_primary_strategies(text: str, max_chars: int | None) -> tuple[str, Any] | None:
    value = parse_fenced_block(text)
    if value is not None:
        return "fenced_block", value

    cleaned = clean_text(text)

    value = scan_brackets(cleaned, max_chars)
    if value is not None:
        return "bracket_scan", value

    value = _loads_container(cleaned)
    if value is not None:
        return "whole_string", value

    return None


def recover_json(text: str | None, max_chars: int | None = None) -> StageResult:
    """
    Locate and parse exactly one JSON array or object in model output.

    Never raises. Identical text always recovers an identical value.

    Args:
        text: Candidate text from the extractor
        max_chars: Bracket scan window (settings.json_scan_max_chars when None)

    Returns:
        StageResult holding the parsed list/dict and the strategy name, or a
        NO_JSON_FOUND failure
    """
    if not text or not text.strip():
        return StageResult.failure(FailureReason.NO_JSON_FOUND, "empty text")

    found = _try_primary_strategies(text, max_chars)
    if found is None:
        value = parse_wrapped_array(clean_text(text))
        if value is not None:
            found = ("wrapped_array", value)

    if found is None:
        stripped = strip_list_markers(text)
        if stripped != text:
            retried = _try_primary_strategies(stripped, max_chars)
            if retried is not None:
                found = (f"list_markers_{retried[0]}", retried[1])

    if found is None:
        logger.info(f"No JSON recovered from {len(text)} chars of model output")
        return StageResult.failure(FailureReason.NO_JSON_FOUND, text[:200])

    strategy, value = found
    logger.debug(f"Recovered JSON {type(value).__name__} via {strategy}")
    return StageResult.success(value, strategy)
