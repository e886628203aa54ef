"""Stage 5 — Quality statistics and domain insights."""

from __future__ import annotations

from collections import Counter
from typing import Callable

import structlog

from search_quality.domains.general import GeneralHandler
from search_quality.domains.javascript import JavaScriptHandler
from search_quality.domains.medical import MedicalHandler
from search_quality.domains.nim import NimHandler
from search_quality.models import (
    DomainInsights,
    QualityConfig,
    QualityStats,
    QueryDomain,
    SearchResult,
    SourceType,
)
from search_quality.pipeline.stage1_domain import detect_domain
from search_quality.pipeline.stage2_score import is_authority_source
from search_quality.utils.url_utils import extract_domain

logger = structlog.get_logger(__name__)

HIGH_QUALITY_SCORE = 0.7

DomainStats = Callable[[list[SearchResult], GeneralHandler, QualityConfig], dict[str, int]]


# ---------------------------------------------------------------------------
# Per-domain sub-statistics
# ---------------------------------------------------------------------------


def _medical_stats(
    results: list[SearchResult], handler: GeneralHandler, config: QualityConfig
) -> dict[str, int]:
    domain_config = config.domain_config(QueryDomain.MEDICAL)
    authority = sum(
        1
        for r in results
        if r.source_type is SourceType.MEDICAL_AUTHORITY
        or is_authority_source(r.link, domain_config, config)
    )
    evidence = 0
    if isinstance(handler, MedicalHandler):
        evidence = sum(1 for r in results if handler.is_evidence_based(r))
    return {"authority_source_count": authority, "evidence_based_count": evidence}


def _javascript_stats(
    results: list[SearchResult], handler: GeneralHandler, config: QualityConfig
) -> dict[str, int]:
    frameworks = 0
    if isinstance(handler, JavaScriptHandler):
        frameworks = sum(1 for r in results if handler.mentions_framework(r))
    return {
        "framework_mention_count": frameworks,
        "code_example_count": sum(1 for r in results if handler.detect_code_examples(r.snippet)),
        "official_docs_count": sum(
            1 for r in results if handler.detect_source_type(r.link) is SourceType.DOCUMENTATION
        ),
    }


def _nim_stats(
    results: list[SearchResult], handler: GeneralHandler, config: QualityConfig
) -> dict[str, int]:
    comparative = official = 0
    if isinstance(handler, NimHandler):
        comparative = sum(1 for r in results if handler.is_comparative_content(r))
        official = sum(1 for r in results if handler.is_official_source(r.link))
    return {
        "comparative_content_count": comparative,
        "official_source_count": official,
        "code_example_count": sum(1 for r in results if handler.detect_code_examples(r.snippet)),
    }


def _general_stats(
    results: list[SearchResult], handler: GeneralHandler, config: QualityConfig
) -> dict[str, int]:
    sites = {extract_domain(r.link) for r in results} - {""}
    return {"distinct_sites": len(sites)}


_DOMAIN_STATS: dict[QueryDomain, DomainStats] = {
    QueryDomain.MEDICAL: _medical_stats,
    QueryDomain.JAVASCRIPT: _javascript_stats,
    QueryDomain.NIM: _nim_stats,
    QueryDomain.GENERAL: _general_stats,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compute_stats(
    results: list[SearchResult],
    config: QualityConfig,
    handlers: dict[QueryDomain, GeneralHandler],
    domain: QueryDomain | None = None,
) -> QualityStats:
    """Aggregate quality statistics over *results*.

    Args:
        results:  Scored (and ideally enriched) results.
        config:   Active quality config.
        handlers: Domain dispatch table.
        domain:   Query domain; enables the domain-specific sub-statistics.

    Returns:
        :class:`QualityStats`; the average is 0.0 for an empty list.
    """
    total = len(results)
    scores = [r.score or 0.0 for r in results]
    source_types = Counter(
        r.source_type.value if r.source_type is not None else "Unknown" for r in results
    )
    issues = Counter(issue for r in results for issue in (r.issues or ()))

    domain_stats: dict[str, int] = {}
    if domain is not None:
        domain_stats = _DOMAIN_STATS[domain](results, handlers[domain], config)

    return QualityStats(
        total_results=total,
        average_score=sum(scores) / total if total else 0.0,
        high_quality_count=sum(1 for s in scores if s >= HIGH_QUALITY_SCORE),
        source_type_distribution=dict(source_types),
        common_issues=dict(issues),
        domain=domain,
        domain_stats=domain_stats,
    )


def build_insights(stats: QualityStats) -> DomainInsights:
    """Render *stats* into insight and recommendation sentences.

    *stats* must carry a domain, i.e. come from :func:`compute_stats`
    called with one.
    """
    domain = stats.domain or QueryDomain.GENERAL
    insights: list[str] = []
    recommendations: list[str] = []

    if stats.total_results == 0:
        insights.append("No results passed quality filtering")
        recommendations.append("Broaden the query or lower the minimum quality score")
        return DomainInsights(domain=domain, insights=insights, recommendations=recommendations)

    insights.append(
        f"{stats.total_results} results with average quality {stats.average_score:.2f}"
    )
    if stats.high_quality_count == 0:
        recommendations.append("No high-quality results; add more specific terms to the query")

    counts = stats.domain_stats
    if domain is QueryDomain.MEDICAL:
        authority = counts.get("authority_source_count", 0)
        insights.append(f"{authority} results from official medical sources")
        if authority == 0:
            recommendations.append("Name an authority such as CDC, NIH or WHO in the query")
        if counts.get("evidence_based_count", 0) == 0:
            recommendations.append("Look for peer-reviewed studies or systematic reviews")

    elif domain is QueryDomain.JAVASCRIPT:
        docs = counts.get("official_docs_count", 0)
        examples = counts.get("code_example_count", 0)
        insights.append(f"{docs} results from official documentation")
        insights.append(f"{examples} results include code examples")
        insights.append(f"{counts.get('framework_mention_count', 0)} results mention a framework")
        if docs == 0:
            recommendations.append("Add 'MDN' or the library name to reach official documentation")
        if examples == 0:
            recommendations.append("Add 'example' to the query to surface code samples")

    elif domain is QueryDomain.NIM:
        official = counts.get("official_source_count", 0)
        comparative = counts.get("comparative_content_count", 0)
        insights.append(f"{official} results from official Nim sources")
        if comparative:
            insights.append(f"{comparative} results compare Nim with other languages")
        if official == 0:
            recommendations.append("Search nim-lang.org or forum.nim-lang.org directly")
        if counts.get("code_example_count", 0) == 0:
            recommendations.append("Add 'example' or 'proc' to the query to surface Nim code")

    else:
        sites = counts.get("distinct_sites", 0)
        insights.append(f"{sites} distinct sites")
        if sites == 1 and stats.total_results > 1:
            recommendations.append("All results come from one site; rephrase to diversify sources")

    return DomainInsights(domain=domain, insights=insights, recommendations=recommendations)


def domain_breakdown(queries: list[str], config: QualityConfig) -> dict[QueryDomain, int]:
    """Count how many of *queries* fall into each domain."""
    counts = {domain: 0 for domain in QueryDomain}
    for query in queries:
        counts[detect_domain(query, config)] += 1
    logger.info("report.domain_breakdown", **{d.value: n for d, n in counts.items()})
    return counts
