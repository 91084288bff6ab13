"""
Exam question paper router.

Normalizes model output into an exam question paper: cached records first
when the caller has enough of them, then the model output, then fallback.
Correct answers are stripped unless the caller presents the admin secret.
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from loguru import logger
from pydantic import BaseModel, Field

from src.llm_output import (
    EXAM_QUESTION,
    GenerationParams,
    normalize_model_output,
    resolve_redaction_policy,
    serve_cached_records,
)
from src.api.models import CachedRecordsMixin, ModelOutputRequest

router = APIRouter()


# ========================================
# Request/Response Models
# ========================================


class QuestionPaperRequest(CachedRecordsMixin, ModelOutputRequest):
    """Request model for a question paper."""

    topic: str | None = Field(None, description="Paper topic")
    subject: str | None = Field(None, description="Alias for topic")
    topics: str | None = Field(None, description="Comma-separated sub-topics")
    keep_answers: bool = Field(False, alias="keepAnswers", description="Include correct answers")
    admin_secret: str | None = Field(None, alias="adminSecret", description="Secret for keepAnswers")
    persist: bool = Field(False, description="Caller intends to store the generated questions")


class PaperMeta(BaseModel):
    """Response metadata for a question paper."""

    topic: str
    count: int
    requested: int
    source: str
    padded: int
    persisted: bool


class QuestionPaper(BaseModel):
    """The question paper itself."""

    topic: str
    difficulty: str
    topics: str
    createdAt: str
    source: str
    questions: list[dict[str, Any]]


class QuestionPaperResponse(BaseModel):
    """Response envelope for a question paper."""

    success: bool
    meta: PaperMeta
    paper: QuestionPaper


# ========================================
# Endpoints
# ========================================


@router.post(
    "/question-paper",
    response_model=QuestionPaperResponse,
    summary="Normalize model output into an exam question paper",
)
def create_question_paper(request: QuestionPaperRequest) -> QuestionPaperResponse:
    """
    Build a question paper from the model's raw response.

    Sources, in order:
    - db: cached_records, when they hold at least `count` valid questions
    - ai: questions recovered from the model output (may be fewer than requested)
    - fallback: deterministic placeholder questions
    """
    params = GenerationParams.from_request(request.params_body())
    policy = resolve_redaction_policy(request.keep_answers, request.admin_secret)
    logger.info(f"Question paper requested: topic='{params.topic}' count={params.count}")

    collection = None
    if request.cached_records and not request.regenerate:
        collection = serve_cached_records(request.cached_records, EXAM_QUESTION, params, policy)

    if collection is None:
        collection = normalize_model_output(request.model_output, EXAM_QUESTION, params, policy)

    meta = collection.meta(params)
    return QuestionPaperResponse(
        success=True,
        meta=PaperMeta(**meta, persisted=request.persist),
        paper=QuestionPaper(
            topic=params.topic,
            difficulty=params.difficulty,
            topics=params.sub_topics,
            createdAt=collection.created_at,
            source=collection.source,
            questions=collection.records,
        ),
    )
