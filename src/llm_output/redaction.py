"""
Answer redaction for outbound records.

Correct answers leave the system only when the caller both asked for them
and is authorized. Otherwise the answer keys are omitted entirely, not
nulled, so serialized output carries no trace of them.
"""

from __future__ import annotations

import hmac
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger

from config import get_settings

from .exceptions import CallerInputError
from .schemas import RecordSchema

ANSWER_KEYS = frozenset({"answer", "correctAnswer", "correct_answer"})


@dataclass(frozen=True)
class RedactionPolicy:
    """Whether answer fields may appear on outbound records."""

    keep_answers: bool = False
    authorized: bool = False

    @property
    def reveals_answers(self) -> bool:
        return self.keep_answers and self.authorized


def redact(
    records: Iterable[Mapping[str, Any]],
    policy: RedactionPolicy,
    schema: RecordSchema | None = None,
) -> list[dict[str, Any]]:
    """
    Project records through the redaction policy.

    Pure: the input records are never mutated; new dicts are returned either way.
    """
    if policy.reveals_answers:
        return [dict(record) for record in records]

    hidden = set(ANSWER_KEYS)
    if schema is not None and schema.answer_field:
        hidden.add(schema.answer_field)
    return [{k: v for k, v in record.items() if k not in hidden} for record in records]


def resolve_redaction_policy(
    keep_answers: bool,
    admin_secret: str | None = None,
    require_secret: bool = True,
) -> RedactionPolicy:
    """
    Decide whether a request may receive answers.

    When a secret is required, answers are disclosed only if a secret is
    configured and the caller presented it. Asking for answers without it is
    a caller error (403), not a silent downgrade.

    Raises:
        CallerInputError: answers requested but not authorized
    """
    if not keep_answers:
        return RedactionPolicy(keep_answers=False, authorized=False)
    if not require_secret:
        return RedactionPolicy(keep_answers=True, authorized=True)

    settings = get_settings()
    if not settings.answers_enabled():
        raise CallerInputError("keepAnswers is not allowed on this endpoint", status_code=403)
    if not hmac.compare_digest(str(admin_secret or "").encode(), settings.keep_answers_secret.encode()):
        logger.warning("Rejected keepAnswers request with invalid admin secret")
        raise CallerInputError("Forbidden: invalid admin secret for keepAnswers", status_code=403)
    return RedactionPolicy(keep_answers=True, authorized=True)
