"""API routers for pathwise."""

from src.api.routers import (
    exam_router,
    quiz_router,
    roadmap_router,
)

__all__ = [
    "roadmap_router",
    "quiz_router",
    "exam_router",
]
