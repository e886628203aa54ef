"""Stage 3 — Threshold filtering, ranking and deduplication."""

from __future__ import annotations

import re
from typing import Any, Callable

import structlog
from pydantic import ValidationError

from search_quality.models import QueryDomain, SearchResult
from search_quality.utils.url_utils import is_search_engine_link

logger = structlog.get_logger(__name__)

DEFAULT_MIN_SCORE = 0.3
# Ceiling on the threshold for domain-specific queries.
DOMAIN_THRESHOLD_CAP = 0.1
_SIGNATURE_TOKENS = 5
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")

Scorer = Callable[[SearchResult], SearchResult]


def effective_threshold(min_score: float, domain: QueryDomain) -> float:
    """Return the score threshold to apply for *domain*."""
    if domain is not QueryDomain.GENERAL:
        return min(min_score, DOMAIN_THRESHOLD_CAP)
    return min_score


def title_signature(title: str) -> str:
    """Return the order-independent signature of *title* used for dedupe."""
    cleaned = _NON_ALNUM.sub("", title.lower())
    return " ".join(sorted(cleaned.split())[:_SIGNATURE_TOKENS])


def coerce_result(item: Any, index: int | None = None) -> SearchResult:  # noqa: ANN401
    """Return *item* as a :class:`SearchResult`; unparseable input becomes an empty result."""
    if isinstance(item, SearchResult):
        return item
    try:
        return SearchResult.model_validate(item)
    except ValidationError as exc:
        logger.warning("filter.result_invalid", index=index, error=str(exc))
        return SearchResult()


def coerce_batch(results: Any) -> list[SearchResult]:  # noqa: ANN401
    """Turn an upstream batch into :class:`SearchResult` records.

    Anything that is not a list or tuple is treated as an empty batch.
    Items that cannot be parsed become empty results, which score 0 and
    drop out at the threshold.
    """
    if not isinstance(results, (list, tuple)):
        logger.warning("filter.batch_not_a_list", type=type(results).__name__)
        return []
    return [coerce_result(item, index) for index, item in enumerate(results)]


def deduplicate(results: list[SearchResult]) -> list[SearchResult]:
    """Drop results whose title signature or case-folded URL was already seen.

    Single left-to-right pass; the first occurrence wins.
    """
    seen_signatures: set[str] = set()
    seen_urls: set[str] = set()
    unique: list[SearchResult] = []

    for result in results:
        signature = title_signature(result.title)
        url = result.link.lower()
        if signature in seen_signatures or url in seen_urls:
            continue
        seen_signatures.add(signature)
        seen_urls.add(url)
        unique.append(result)

    return unique


def filter_results(
    results: Any,  # noqa: ANN401
    domain: QueryDomain,
    scorer: Scorer,
    min_score: float = DEFAULT_MIN_SCORE,
) -> list[SearchResult]:
    """Score, threshold, rank and deduplicate *results*.

    Args:
        results:   Upstream batch (list of records or dicts).
        domain:    Domain detected for the query.
        scorer:    Callable scoring one result for the query.
        min_score: Requested minimum score; loosened to at most 0.1 for
            domain-specific queries.

    Returns:
        Surviving results sorted by descending score (ties keep their
        input order), without duplicates.
    """
    batch = coerce_batch(results)
    threshold = effective_threshold(min_score, domain)

    scored = [scorer(result) for result in batch]
    kept = [r for r in scored if (r.score or 0.0) >= threshold]
    # list.sort is stable, so equal scores keep their input order.
    kept.sort(key=lambda r: r.score or 0.0, reverse=True)
    unique = deduplicate(kept)

    logger.info(
        "filter.done",
        domain=domain.value,
        threshold=threshold,
        total=len(batch),
        kept=len(kept),
        unique=len(unique),
    )
    return unique


def clean_results(results: Any) -> list[SearchResult]:  # noqa: ANN401
    """Drop records that cannot be results at all.

    Removes non-records, records without a title or link, and search-engine
    internal links (result pages and redirect wrappers).
    """
    if not isinstance(results, (list, tuple)):
        logger.warning("clean.batch_not_a_list", type=type(results).__name__)
        return []

    cleaned: list[SearchResult] = []
    for index, item in enumerate(results):
        if not isinstance(item, (SearchResult, dict)):
            continue
        result = coerce_result(item, index)
        if not result.title or not result.link:
            continue
        if is_search_engine_link(result.link):
            continue
        cleaned.append(result)

    logger.debug("clean.done", total=len(results), kept=len(cleaned))
    return cleaned
