"""
Request parameters for a generation request.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from config import get_settings

from .exceptions import CallerInputError

TOPIC_KEYS = ("topic", "subject", "goal", "career", "domain")
DIFFICULTY_KEYS = ("difficulty", "level")
SUB_TOPIC_KEYS = ("sub_topics", "subTopics", "topics")

DEFAULT_DIFFICULTY = "mixed"


def _first_text(body: Mapping[str, Any], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def slugify(text: str) -> str:
    """Lower-case, whitespace collapsed to underscores."""
    return re.sub(r"\s+", "_", text.strip()).lower()


@dataclass(frozen=True)
class GenerationParams:
    """What the caller asked for: topic, item count, difficulty, sub-topics."""

    topic: str
    count: int
    difficulty: str = DEFAULT_DIFFICULTY
    sub_topics: str = ""

    def __post_init__(self):
        if not isinstance(self.topic, str) or not self.topic.strip():
            raise CallerInputError("Missing or invalid 'topic' (string required)")
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count <= 0:
            raise CallerInputError("'count' must be a positive integer")
        max_count = get_settings().max_item_count
        if self.count > max_count:
            raise CallerInputError(f"count too large (max {max_count})")

    @property
    def topic_slug(self) -> str:
        return slugify(self.topic)

    @classmethod
    def from_request(cls, body: Mapping[str, Any] | None) -> GenerationParams:
        """
        Build params from a loosely-typed request body.

        Accepts every key variant the clients send (topic/subject/goal/career/domain,
        difficulty/level, topics/sub_topics). A missing count uses the configured
        default; a present but non-positive or non-numeric count is rejected.
        """
        body = body or {}
        topic = _first_text(body, TOPIC_KEYS)

        raw_count = body.get("count")
        if raw_count is None or raw_count == "":
            count = get_settings().default_item_count
        else:
            count = _parse_count(raw_count)

        return cls(
            topic=topic,
            count=count,
            difficulty=_first_text(body, DIFFICULTY_KEYS) or DEFAULT_DIFFICULTY,
            sub_topics=_first_text(body, SUB_TOPIC_KEYS),
        )


def _parse_count(raw_count: Any) -> int:
    if isinstance(raw_count, bool):
        raise CallerInputError("'count' must be a positive integer")
    try:
        number = float(raw_count)
    except (TypeError, ValueError):
        raise CallerInputError("'count' must be a positive integer") from None
    if not number.is_integer() or number <= 0:
        raise CallerInputError("'count' must be a positive integer")
    return int(number)
