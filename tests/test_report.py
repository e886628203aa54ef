"""Tests for enrichment, statistics, insights and the pipeline orchestrator."""

from __future__ import annotations

import pytest

from search_quality.analyzer import SearchQualityAnalyzer, analyze_results_quality
from search_quality.models import (
    ContentLength,
    Difficulty,
    QueryDomain,
    SearchResult,
    SourceType,
    UpstreamResponse,
)
from search_quality.pipeline.orchestrator import run_pipeline
from search_quality.pipeline.stage4_enrich import content_length


# ---------------------------------------------------------------------------
# Stage 4 — Enrichment
# ---------------------------------------------------------------------------


class TestContentLength:
    """Tests for the snippet length buckets."""

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (201, ContentLength.LONG),
            (200, ContentLength.MEDIUM),
            (101, ContentLength.MEDIUM),
            (100, ContentLength.SHORT),
            (0, ContentLength.SHORT),
        ],
    )
    def test_boundaries(self, size: int, expected: ContentLength) -> None:
        assert content_length("a" * size) is expected


class TestEnrichResult:
    """Tests for metadata enrichment."""

    def test_javascript_result(
        self, analyzer: SearchQualityAnalyzer, react_result: SearchResult
    ) -> None:
        enriched = analyzer.enrich_result(react_result, "react hooks example")
        assert enriched.source_type is SourceType.TUTORIAL
        assert enriched.difficulty is Difficulty.INTERMEDIATE
        assert enriched.content_length is ContentLength.MEDIUM
        assert enriched.has_code_examples is False

    def test_code_example_detected(self, analyzer: SearchQualityAnalyzer) -> None:
        result = SearchResult(
            title="Array helpers",
            link="https://github.com/someone/helpers",
            snippet="Call `arr.map(fn)` to transform every element.",
        )
        enriched = analyzer.enrich_result(result, "javascript array map")
        assert enriched.source_type is SourceType.CODE_REPOSITORY
        assert enriched.has_code_examples is True

    def test_non_code_domain_leaves_flag_unset(
        self, analyzer: SearchQualityAnalyzer, cdc_result: SearchResult
    ) -> None:
        enriched = analyzer.enrich_result(cdc_result, "covid vaccine efficacy")
        assert enriched.source_type is SourceType.MEDICAL_AUTHORITY
        assert enriched.has_code_examples is None
        assert enriched.difficulty is not None

    def test_dict_record_is_validated(self, analyzer: SearchQualityAnalyzer) -> None:
        """A dict record is enriched like the equivalent model."""
        enriched = analyzer.enrich_result(
            {"title": "COVID data", "link": "https://www.cdc.gov/covid", "snippet": "Stay safe."},
            "covid vaccine",
        )
        assert enriched.source_type is SourceType.MEDICAL_AUTHORITY
        assert enriched.content_length is ContentLength.SHORT

    def test_unparseable_record_enriched_as_empty(self, analyzer: SearchQualityAnalyzer) -> None:
        """A record that cannot be parsed is annotated as an empty result."""
        enriched = analyzer.enrich_result(None, "garden hose")
        assert enriched.title == ""
        assert enriched.content_length is ContentLength.SHORT

    def test_input_not_mutated(
        self, analyzer: SearchQualityAnalyzer, react_result: SearchResult
    ) -> None:
        analyzer.enrich_result(react_result, "react hooks")
        assert react_result.source_type is None


class TestEnhanceSnippet:
    """Tests for snippet clean-up."""

    def test_strips_ellipses_and_breaks_code(self, analyzer: SearchQualityAnalyzer) -> None:
        result = SearchResult(
            title="Constants",
            link="https://example.com",
            snippet="...Use   const a = 1 here...",
        )
        enhanced = analyzer.enhance_snippet(result, "javascript const")
        assert enhanced.snippet == "Use \nconst a = 1 here"

    def test_unicode_ellipsis(self, analyzer: SearchQualityAnalyzer) -> None:
        result = SearchResult(title="Hose", link="https://example.com", snippet="…a good hose…")
        assert analyzer.enhance_snippet(result, "garden hose").snippet == "a good hose"

    def test_keeps_line_breaks(self, analyzer: SearchQualityAnalyzer) -> None:
        result = SearchResult(title="Hose", link="https://example.com", snippet="line one\nline two")
        assert analyzer.enhance_snippet(result, "garden hose").snippet == "line one\nline two"


# ---------------------------------------------------------------------------
# Stage 5 — Statistics and insights
# ---------------------------------------------------------------------------


class TestComputeStats:
    """Tests for aggregate statistics."""

    def test_empty(self, analyzer: SearchQualityAnalyzer) -> None:
        stats = analyzer.compute_stats([])
        assert stats.total_results == 0
        assert stats.average_score == 0.0
        assert stats.high_quality_count == 0
        assert stats.domain is None

    def test_aggregates(self) -> None:
        results = [
            SearchResult(title="a", link="https://a.example", snippet="x", score=0.9,
                         source_type=SourceType.BLOG),
            SearchResult(title="b", link="https://b.example", snippet="y", score=0.3,
                         issues=["Snippet too short"]),
        ]
        stats = analyze_results_quality(results)
        assert stats.total_results == 2
        assert stats.average_score == pytest.approx(0.6)
        assert stats.high_quality_count == 1
        assert stats.source_type_distribution == {"Blog": 1, "Unknown": 1}
        assert stats.common_issues == {"Snippet too short": 1}

    def test_medical_sub_stats(
        self, analyzer: SearchQualityAnalyzer, cdc_result: SearchResult
    ) -> None:
        stats = analyzer.compute_stats([cdc_result], "covid vaccine")
        assert stats.domain is QueryDomain.MEDICAL
        assert stats.domain_stats == {"authority_source_count": 1, "evidence_based_count": 0}

    def test_javascript_sub_stats(
        self, analyzer: SearchQualityAnalyzer, react_result: SearchResult
    ) -> None:
        stats = analyzer.compute_stats([react_result], "react hooks")
        assert stats.domain_stats == {
            "framework_mention_count": 1,
            "code_example_count": 0,
            "official_docs_count": 0,
        }

    def test_nim_sub_stats(self, analyzer: SearchQualityAnalyzer) -> None:
        results = [
            SearchResult(title="Nim vs Rust", link="https://nim-lang.org/blog/x", snippet="A comparison."),
            SearchResult(title="Nim procs", link="https://example.com/nim",
                         snippet="proc add(a, b: int): int = a + b"),
        ]
        stats = analyzer.compute_stats(results, "nim proc")
        assert stats.domain_stats == {
            "comparative_content_count": 1,
            "official_source_count": 1,
            "code_example_count": 1,
        }

    def test_general_distinct_sites(
        self, analyzer: SearchQualityAnalyzer, garden_results: list[SearchResult]
    ) -> None:
        stats = analyzer.compute_stats(garden_results, "garden hose reviews")
        assert stats.domain_stats == {"distinct_sites": 3}


class TestInsights:
    """Tests for insight and recommendation messages."""

    def test_empty_results(self, analyzer: SearchQualityAnalyzer) -> None:
        insights = analyzer.get_insights([], "covid vaccine")
        assert insights.domain is QueryDomain.MEDICAL
        assert insights.insights == ["No results passed quality filtering"]
        assert insights.recommendations == ["Broaden the query or lower the minimum quality score"]

    def test_medical(self, analyzer: SearchQualityAnalyzer, cdc_result: SearchResult) -> None:
        scored = analyzer.score_result(cdc_result, "covid vaccine")
        insights = analyzer.get_insights([scored], "covid vaccine")
        assert "1 results from official medical sources" in insights.insights
        assert "Look for peer-reviewed studies or systematic reviews" in insights.recommendations

    def test_javascript_recommendations(
        self, analyzer: SearchQualityAnalyzer, react_result: SearchResult
    ) -> None:
        insights = analyzer.get_insights([react_result], "react hooks")
        assert "1 results mention a framework" in insights.insights
        assert "Add 'example' to the query to surface code samples" in insights.recommendations
        assert "No high-quality results; add more specific terms to the query" in (
            insights.recommendations
        )

    def test_nim_comparison_insight(self, analyzer: SearchQualityAnalyzer) -> None:
        results = [
            SearchResult(title="Why Nim?", link="https://example.com/why", snippet="Reasons.",
                         score=0.8),
        ]
        insights = analyzer.get_insights(results, "nim proc")
        assert "1 results compare Nim with other languages" in insights.insights
        assert "Search nim-lang.org or forum.nim-lang.org directly" in insights.recommendations

    def test_general_single_site(self, analyzer: SearchQualityAnalyzer) -> None:
        results = [
            SearchResult(title="a", link="https://www.example.com/a", snippet="x", score=0.9),
            SearchResult(title="b", link="https://example.com/b", snippet="y", score=0.9),
        ]
        insights = analyzer.get_insights(results, "garden hose")
        assert "1 distinct sites" in insights.insights
        assert insights.recommendations == [
            "All results come from one site; rephrase to diversify sources"
        ]


class TestDomainBreakdown:
    """Tests for the per-domain query histogram."""

    def test_counts_every_domain(self, analyzer: SearchQualityAnalyzer) -> None:
        counts = analyzer.domain_breakdown(
            ["covid vaccine", "react hooks", "nim proc overloading", "garden hose", "flu study"]
        )
        assert counts == {
            QueryDomain.MEDICAL: 2,
            QueryDomain.JAVASCRIPT: 1,
            QueryDomain.NIM: 1,
            QueryDomain.GENERAL: 1,
        }

    def test_empty(self, analyzer: SearchQualityAnalyzer) -> None:
        assert analyzer.domain_breakdown([]) == {domain: 0 for domain in QueryDomain}


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class TestRunPipeline:
    """Tests for the end-to-end pipeline run."""

    def test_full_run(
        self, analyzer: SearchQualityAnalyzer, garden_results: list[SearchResult]
    ) -> None:
        response = run_pipeline("garden hose reviews", garden_results, analyzer)
        assert response.domain is QueryDomain.GENERAL
        assert response.min_score == 0.3
        assert len(response.results) == 1
        assert response.results[0].content_length is ContentLength.SHORT
        assert response.stats.total_results == 1
        assert response.insights.insights[0] == "1 results with average quality 1.00"

    def test_domain_threshold_reported(
        self, analyzer: SearchQualityAnalyzer, react_result: SearchResult
    ) -> None:
        response = run_pipeline("react hooks", [react_result], analyzer)
        assert response.min_score == 0.1

    def test_filtering_disabled_keeps_everything(
        self, analyzer: SearchQualityAnalyzer, garden_results: list[SearchResult]
    ) -> None:
        response = run_pipeline(
            "garden hose reviews", garden_results, analyzer, enable_filtering=False
        )
        assert len(response.results) == 4
        assert response.min_score == 0.0
        scores = [r.score or 0.0 for r in response.results]
        assert scores == sorted(scores, reverse=True)

    def test_unwraps_upstream_response(
        self, analyzer: SearchQualityAnalyzer, garden_results: list[SearchResult]
    ) -> None:
        upstream = UpstreamResponse(query="garden hose reviews", results=garden_results)
        response = run_pipeline("garden hose reviews", upstream, analyzer)
        assert len(response.results) == 1

    def test_failed_upstream_yields_empty_report(self, analyzer: SearchQualityAnalyzer) -> None:
        upstream = UpstreamResponse(query="garden hose", success=False, error="timeout")
        response = run_pipeline("garden hose", upstream, analyzer)
        assert response.results == []
        assert response.insights.insights == ["No results passed quality filtering"]
