"""
Quiz router.

Normalizes model output into a practice quiz. Quizzes are self-graded in the
client, so answers are included unless the caller opts out, and the quiz
always holds exactly the requested number of questions.
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from loguru import logger
from pydantic import BaseModel, Field

from src.llm_output import (
    QUIZ_QUESTION,
    GenerationParams,
    normalize_model_output,
    resolve_redaction_policy,
)
from src.api.models import ModelOutputRequest

router = APIRouter()


class QuizRequest(ModelOutputRequest):
    """Request model for a practice quiz."""

    goal: str | None = Field(None, description="Learning goal the quiz covers")
    topic: str | None = Field(None, description="Alias for goal")
    keep_answers: bool = Field(True, alias="keepAnswers", description="Include answers for client-side grading")


class QuizResponse(BaseModel):
    """Response model for a practice quiz."""

    questions: list[dict[str, Any]]
    meta: dict[str, Any]


@router.post(
    "/generate",
    response_model=QuizResponse,
    summary="Normalize model output into a practice quiz",
)
def generate_quiz(request: QuizRequest) -> QuizResponse:
    """Recover quiz questions from the model output, padded to the requested count."""
    params = GenerationParams.from_request(request.params_body())
    policy = resolve_redaction_policy(request.keep_answers, require_secret=False)
    logger.info(f"Quiz requested: goal='{params.topic}' count={params.count}")

    collection = normalize_model_output(request.model_output, QUIZ_QUESTION, params, policy)
    return QuizResponse(questions=collection.records, meta=collection.meta(params))
