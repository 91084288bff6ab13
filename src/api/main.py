"""
FastAPI application for pathwise.

Provides REST API for:
- Roadmap normalization (phased learning paths)
- Practice quiz normalization
- Exam question paper normalization with answer redaction

Each endpoint receives the model's raw response from the AI-calling service
and returns validated records, falling back to deterministic placeholders
when nothing usable can be recovered.
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from config import get_settings
from src.llm_output import CallerInputError, list_schemas

settings = get_settings()


def _configure_logging() -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {name} | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB", retention=5)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    _configure_logging()
    logger.info(f"Starting pathwise service on {settings.api_host}:{settings.api_port}")

    yield

    # Shutdown
    logger.info("Shutting down pathwise service...")


app = FastAPI(
    title="Pathwise",
    description="""
    Normalization service for AI-generated career roadmaps, quizzes and exam papers.

    ## Data Flow

    ```
    AI provider response
        ↓ text extraction
    Candidate text
        ↓ JSON recovery
    Parsed JSON
        ↓ schema normalization (+ fallback)
    Records
        ↓ answer redaction
    Client
    ```
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for the browser client
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CallerInputError)
async def caller_input_error_handler(request: Request, exc: CallerInputError) -> JSONResponse:
    """Malformed requests are the only errors reported to clients."""
    logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


# ========================================
# Health & Status Endpoints
# ========================================


@app.get("/", tags=["Health"])
def root() -> dict[str, str]:
    """Root endpoint returning service info."""
    return {
        "service": "pathwise",
        "version": "1.0.0",
        "status": "ok",
    }


@app.get("/health", tags=["Health"])
def health_check() -> dict[str, Any]:
    """Health check with the active limits and schemas."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "schemas": [schema.name for schema in list_schemas()],
        "config": {
            **settings.get_limits(),
            "keep_answers_enabled": settings.answers_enabled(),
        },
    }


# ========================================
# Import and mount routers
# ========================================

from src.api.routers import exam_router, quiz_router, roadmap_router

app.include_router(roadmap_router.router, prefix="/api/roadmaps", tags=["Roadmaps"])
app.include_router(quiz_router.router, prefix="/api/quiz", tags=["Quiz"])
app.include_router(exam_router.router, prefix="/api/exam", tags=["Exam Prep"])
