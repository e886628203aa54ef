"""Pipeline orchestrator — wires the quality stages together for one query."""

from __future__ import annotations

import time
from typing import Any

import structlog

from search_quality.analyzer import SearchQualityAnalyzer
from search_quality.models import AnalysisResponse, UpstreamResponse
from search_quality.pipeline.stage3_filter import DEFAULT_MIN_SCORE, effective_threshold

logger = structlog.get_logger(__name__)


def run_pipeline(
    query: str,
    results: Any,  # noqa: ANN401
    analyzer: SearchQualityAnalyzer,
    min_score: float = DEFAULT_MIN_SCORE,
    enable_filtering: bool = True,
    enhance_snippets: bool = False,
) -> AnalysisResponse:
    """Execute the full quality pipeline for *query*.

    Stages:
        1. Domain detection.
        2-3. Scoring, threshold, ranking and dedupe (or scoring only when
           filtering is disabled).
        4. Enrichment, plus optional snippet clean-up.
        5. Statistics and insights.

    Args:
        query:            Query the results were fetched for.
        results:          Upstream batch; an :class:`UpstreamResponse` is unwrapped.
        analyzer:         Configured analyzer.
        min_score:        Requested minimum score.
        enable_filtering: When False every result is kept, scored and sorted.
        enhance_snippets: Reformat snippets for display after enrichment.

    Returns:
        :class:`AnalysisResponse` ready to serialise as JSON.
    """
    t_start = time.perf_counter()

    if isinstance(results, UpstreamResponse):
        if not results.success:
            logger.warning("pipeline.upstream_failed", query=query[:80], error=results.error)
        results = results.results

    log = logger.bind(query=query[:80], min_score=min_score)
    log.info("pipeline.start")

    # Stage 1 — Domain detection
    domain = analyzer.detect_domain(query)

    # Stages 2-3 — Score, filter, dedupe
    if enable_filtering:
        ranked = analyzer.filter_results(results, query, min_score)
    else:
        ranked = [analyzer.score_result(r, query) for r in analyzer.clean_results(results)]
        ranked.sort(key=lambda r: r.score or 0.0, reverse=True)

    # Stage 4 — Enrichment
    enriched = [analyzer.enrich_result(r, query) for r in ranked]
    if enhance_snippets:
        enriched = [analyzer.enhance_snippet(r, query) for r in enriched]

    # Stage 5 — Stats and insights
    stats = analyzer.compute_stats(enriched, query)
    insights = analyzer.get_insights(enriched, query)

    elapsed_ms = (time.perf_counter() - t_start) * 1000
    log.info(
        "pipeline.complete",
        domain=domain.value,
        results=len(enriched),
        latency_ms=round(elapsed_ms, 1),
    )
    return AnalysisResponse(
        query=query,
        domain=domain,
        min_score=effective_threshold(min_score, domain) if enable_filtering else 0.0,
        results=enriched,
        stats=stats,
        insights=insights,
        query_time_ms=round(elapsed_ms, 1),
    )
