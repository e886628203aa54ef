"""FastAPI application entry point with lifespan management."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from search_quality.analyzer import SearchQualityAnalyzer
from search_quality.config import load_quality_config, settings
from search_quality.models import (
    AnalysisResponse,
    AnalyzeRequest,
    DomainResponse,
    HealthResponse,
    ScoreRequest,
    SearchResult,
)
from search_quality.pipeline.orchestrator import run_pipeline
from search_quality.utils.logging import configure_logging

logger = structlog.get_logger(__name__)

_startup_time: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the analyzer once at startup; a bad quality config aborts startup."""
    global _startup_time
    configure_logging(settings.environment, settings.log_level)
    log = structlog.get_logger(__name__)

    log.info("search_quality.startup", environment=settings.environment, port=settings.port)

    config = load_quality_config(settings.quality_config_path)
    app.state.analyzer = SearchQualityAnalyzer(config)

    _startup_time = time.time()
    log.info("search_quality.ready")

    yield

    log.info("search_quality.shutdown")


app = FastAPI(
    title="Search Quality Service",
    description="Domain-aware scoring, filtering and enrichment of search result snippets.",
    version="0.1.0",
    lifespan=lifespan,
)


def _analyzer(request: Request) -> SearchQualityAnalyzer:
    return request.app.state.analyzer


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.post("/analyze", response_model=AnalysisResponse, summary="Score, filter and annotate results")
async def analyze(body: AnalyzeRequest, request: Request) -> AnalysisResponse:
    """Run the full quality pipeline over the posted results."""
    min_score = body.min_score if body.min_score is not None else settings.min_quality_score
    return run_pipeline(
        query=body.query.strip(),
        results=body.results,
        analyzer=_analyzer(request),
        min_score=min_score,
        enable_filtering=settings.enable_quality_filtering,
        enhance_snippets=body.enhance_snippets,
    )


@app.post("/score", response_model=SearchResult, summary="Score a single result")
async def score(body: ScoreRequest, request: Request) -> SearchResult:
    """Return the scored copy of one result."""
    return _analyzer(request).score_result(body.result, body.query.strip())


@app.get("/domain", response_model=DomainResponse, summary="Detect the query domain")
async def domain(
    request: Request,
    q: str = Query(..., min_length=1, max_length=512, description="Search query"),
) -> DomainResponse:
    return DomainResponse(query=q, domain=_analyzer(request).detect_domain(q))


@app.get("/health", response_model=HealthResponse, summary="Service health check")
async def health() -> HealthResponse:
    uptime = time.time() - _startup_time if _startup_time else 0.0
    return HealthResponse(
        status="ok",
        environment=settings.environment,
        uptime_seconds=round(uptime, 1),
    )


# ---------------------------------------------------------------------------
# Generic error handler
# ---------------------------------------------------------------------------


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all error handler that logs and returns a structured response."""
    logger.error("unhandled_exception", path=str(request.url), error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error.", "error": str(exc)},
    )
