"""
Text extraction from provider responses.

Provider SDKs disagree on where the generated text lives. Extraction tries an
ordered list of strategies, each a pure function from the raw response to an
optional string, and keeps the first non-empty result.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger


@dataclass(frozen=True)
class CandidateText:
    """Text believed to contain the model's answer, plus the path that produced it."""

    text: str
    source: str

    @property
    def ok(self) -> bool:
        return bool(self.text.strip())


def _get(obj: Any, key: str) -> Any:
    """Read a key from a mapping or an attribute from an object."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def _first(items: Any) -> Any:
    if isinstance(items, (list, tuple)) and items:
        return items[0]
    return None


def _from_text_accessor(raw: Any) -> str | None:
    """Zero-argument text() accessor (Gemini / Responses SDK objects)."""
    accessor = _get(raw, "text")
    if callable(accessor):
        result = accessor()
        if isinstance(result, str):
            return result
    return None


def _from_text_property(raw: Any) -> str | None:
    text = _get(raw, "text")
    return text if isinstance(text, str) else None


def _from_output_items(raw: Any) -> str | None:
    """output[0].content[0].text"""
    content = _first(_get(_first(_get(raw, "output")), "content"))
    text = _get(content, "text")
    return text if isinstance(text, str) else None


def _from_chat_choices(raw: Any) -> str | None:
    """choices[0].message.content, then choices[0].text (chat completions)."""
    choice = _first(_get(raw, "choices"))
    if choice is None:
        return None
    content = _get(_get(choice, "message"), "content")
    if isinstance(content, str) and content:
        return content
    text = _get(choice, "text")
    return text if isinstance(text, str) else None


def _from_candidate_parts(raw: Any) -> str | None:
    """candidates[0].content.parts[0].text (Gemini REST payloads)."""
    candidate = _first(_get(raw, "candidates"))
    part = _first(_get(_get(candidate, "content"), "parts"))
    text = _get(part, "text")
    return text if isinstance(text, str) else None


def _json_default(obj: Any) -> Any:
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    if hasattr(obj, "__dict__"):
        return vars(obj)
    return str(obj)


def _from_serialized(raw: Any) -> str | None:
    """Last resort: the whole response as JSON so later stages have something to search."""
    return json.dumps(raw, default=_json_default, ensure_ascii=False)


EXTRACTION_STRATEGIES: tuple[tuple[str, Callable[[Any], str | None]], ...] = (
    ("text_accessor", _from_text_accessor),
    ("text_property", _from_text_property),
    ("output_content", _from_output_items),
    ("chat_choices", _from_chat_choices),
    ("candidate_parts", _from_candidate_parts),
    ("serialized", _from_serialized),
)


def extract_text(raw: Any) -> CandidateText:
    """
    Extract the single best candidate text from a raw model response.

    Never raises. A plain string is taken as the model text itself; anything
    else goes through EXTRACTION_STRATEGIES in order.

    Args:
        raw: Provider response object, mapping, or raw text

    Returns:
        CandidateText, with an empty text when nothing could be located
    """
    if raw is None:
        return CandidateText("", "none")
    if isinstance(raw, str):
        return CandidateText(raw, "raw_text")

    for name, strategy in EXTRACTION_STRATEGIES:
        try:
            text = strategy(raw)
        except Exception as e:
            logger.debug(f"Extraction strategy {name} failed: {e}")
            continue
        if text:
            if name == "serialized":
                logger.warning(
                    f"No text field found on {type(raw).__name__} response, "
                    "searching the serialized payload instead"
                )
            else:
                logger.debug(f"Extracted {len(text)} chars via {name}")
            return CandidateText(text, name)

    logger.warning(f"Could not extract any text from {type(raw).__name__} response")
    return CandidateText("", "none")
