"""Search quality analyzer — the public entry point over the pipeline stages."""

from __future__ import annotations

from typing import Any

from search_quality.config import build_quality_config
from search_quality.domains.general import GeneralHandler
from search_quality.domains.registry import build_handlers, default_quality_config
from search_quality.models import (
    DomainInsights,
    QualityConfig,
    QualityStats,
    QueryDomain,
    SearchResult,
)
from search_quality.pipeline import stage1_domain, stage2_score, stage3_filter
from search_quality.pipeline import stage4_enrich, stage5_report


class SearchQualityAnalyzer:
    """Scores, filters and annotates search results for a query.

    The config and the handlers built from it are read-only after
    construction, so one analyzer can serve concurrent requests.

    Args:
        config: Quality config; the built-in defaults when omitted.
    """

    def __init__(self, config: QualityConfig | None = None) -> None:
        self.config = config if config is not None else default_quality_config()
        self._handlers = build_handlers(self.config)

    def handler_for(self, domain: QueryDomain) -> GeneralHandler:
        """Return the handler registered for *domain*."""
        return self._handlers[domain]

    def detect_domain(self, query: str) -> QueryDomain:
        """Return the single domain *query* belongs to."""
        return stage1_domain.detect_domain(query, self.config)

    def score_result(self, result: Any, query: str) -> SearchResult:  # noqa: ANN401
        """Return a scored copy of *result*; see :func:`stage2_score.score_result`.

        Dicts are validated first; anything unparseable scores 0.
        """
        return stage2_score.score_result(
            stage3_filter.coerce_result(result), query, self.config, self._handlers
        )

    def filter_results(
        self,
        results: Any,  # noqa: ANN401
        query: str,
        min_score: float = stage3_filter.DEFAULT_MIN_SCORE,
    ) -> list[SearchResult]:
        """Score, threshold, rank and deduplicate *results* for *query*."""
        domain = self.detect_domain(query)
        return stage3_filter.filter_results(
            results,
            domain=domain,
            scorer=lambda result: stage2_score.score_result(
                result, query, self.config, self._handlers, domain=domain
            ),
            min_score=min_score,
        )

    def enrich_result(self, result: Any, query: str) -> SearchResult:  # noqa: ANN401
        """Return a copy of *result* with source type, difficulty and length metadata.

        Dicts are validated first, as in :meth:`score_result`.
        """
        return stage4_enrich.enrich_result(
            stage3_filter.coerce_result(result),
            self.handler_for(self.detect_domain(query)),
        )

    def enhance_snippet(self, result: Any, query: str) -> SearchResult:  # noqa: ANN401
        """Return a copy of *result* with a cleaned, readably formatted snippet."""
        return stage4_enrich.enhance_snippet(
            stage3_filter.coerce_result(result),
            self.handler_for(self.detect_domain(query)),
        )

    def clean_results(self, results: Any) -> list[SearchResult]:  # noqa: ANN401
        """Drop records that are not usable results (see :func:`stage3_filter.clean_results`)."""
        return stage3_filter.clean_results(results)

    def compute_stats(self, results: list[SearchResult], query: str | None = None) -> QualityStats:
        """Aggregate statistics; domain sub-statistics are added when *query* is given."""
        domain = self.detect_domain(query) if query is not None else None
        return stage5_report.compute_stats(results, self.config, self._handlers, domain)

    def get_insights(self, results: list[SearchResult], query: str) -> DomainInsights:
        """Summarise domain coverage of *results* for *query*."""
        return stage5_report.build_insights(self.compute_stats(results, query))

    def domain_breakdown(self, queries: list[str]) -> dict[QueryDomain, int]:
        """Count *queries* per domain."""
        return stage5_report.domain_breakdown(queries, self.config)


# ---------------------------------------------------------------------------
# Convenience functions
# ---------------------------------------------------------------------------


def create_quality_analyzer(overrides: dict[str, Any] | None = None) -> SearchQualityAnalyzer:
    """Build an analyzer from the defaults plus optional partial *overrides*.

    Raises:
        ConfigurationError: If the overrides are invalid.
    """
    return SearchQualityAnalyzer(build_quality_config(overrides))


def filter_results(
    results: Any,  # noqa: ANN401
    query: str,
    min_score: float = stage3_filter.DEFAULT_MIN_SCORE,
) -> list[SearchResult]:
    """Filter *results* for *query* with the default configuration."""
    return create_quality_analyzer().filter_results(results, query, min_score)


def analyze_results_quality(results: list[SearchResult], query: str | None = None) -> QualityStats:
    """Compute quality statistics with the default configuration."""
    return create_quality_analyzer().compute_stats(results, query)
