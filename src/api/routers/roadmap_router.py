"""
Roadmap router.

Normalizes model output into a phased learning roadmap for a career or domain.
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from loguru import logger
from pydantic import BaseModel, Field

from src.llm_output import ROADMAP_PHASE, GenerationParams, normalize_model_output
from src.api.models import ModelOutputRequest

router = APIRouter()


class RoadmapRequest(ModelOutputRequest):
    """Request model for a roadmap."""

    career: str | None = Field(None, description="Target career, e.g. 'Full Stack Developer'")
    domain: str | None = Field(None, description="Alias for career")
    level: str | None = Field(None, description="beginner, intermediate or expert")


class RoadmapResponse(BaseModel):
    """Response model for a roadmap."""

    career: str
    level: str
    generatedAt: str
    roadmap: list[dict[str, Any]]
    meta: dict[str, Any]


@router.post(
    "/generate",
    response_model=RoadmapResponse,
    summary="Normalize model output into a learning roadmap",
)
def generate_roadmap(request: RoadmapRequest) -> RoadmapResponse:
    """Recover roadmap phases from the model output, falling back to a staged template."""
    body = request.params_body()
    body.setdefault("level", "beginner")
    params = GenerationParams.from_request(body)
    logger.info(f"Roadmap requested: career='{params.topic}' level={params.difficulty}")

    collection = normalize_model_output(request.model_output, ROADMAP_PHASE, params)
    return RoadmapResponse(
        career=params.topic,
        level=params.difficulty,
        generatedAt=collection.created_at,
        roadmap=collection.records,
        meta=collection.meta(params),
    )
