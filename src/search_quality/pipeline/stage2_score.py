"""Stage 2 — Multi-factor quality scoring of a single result."""

from __future__ import annotations

import re

import structlog

from search_quality.domains.general import GeneralHandler
from search_quality.domains.nim import NimHandler
from search_quality.models import DomainConfig, QualityConfig, QueryDomain, SearchResult
from search_quality.pipeline.stage1_domain import detect_domain

logger = structlog.get_logger(__name__)

BASE_SCORE = 0.5
MISSING_FIELDS = "Missing required fields"
TITLE_TOO_SHORT = "Title too short"
SNIPPET_TOO_SHORT = "Snippet too short"
LOW_RELEVANCE = "Low query relevance"
LOW_QUALITY_SOURCE = "Low-quality source"
SUSPICIOUS_URL = "Suspicious URL pattern"
SPAM_CONTENT = "Contains spam words"

_SYNONYM_CREDIT = 0.8
_ELLIPSIS = "..."

# Whole snippet reads as sentences: capital start, terminal punctuation.
_SENTENCE = re.compile(r"[A-Z].*[.!?]")
_INNER_BOUNDARY = re.compile(r"[.!?]\s+[A-Z]")


def _clamp(score: float) -> float:
    return max(0.0, min(1.0, score))


def check_length(
    result: SearchResult,
    domain_config: DomainConfig,
    config: QualityConfig,
) -> tuple[str, float, list[str]]:
    """Validate title and snippet lengths.

    Over-long snippets are truncated without penalty; snippets near the
    ideal length earn up to +0.1.

    Returns:
        Tuple of ``(snippet, delta, issues)`` where *snippet* is the
        possibly-truncated snippet to use for the remaining steps.
    """
    delta = 0.0
    issues: list[str] = []
    snippet = result.snippet

    if len(result.title) < domain_config.min_title_length:
        issues.append(TITLE_TOO_SHORT)
        delta -= 0.2

    if len(snippet) < domain_config.min_snippet_length:
        issues.append(SNIPPET_TOO_SHORT)
        delta -= 0.2
    elif len(snippet) > config.max_snippet_length:
        snippet = snippet[: config.max_snippet_length] + _ELLIPSIS
    else:
        length_diff = abs(len(snippet) - config.ideal_snippet_length)
        if length_diff <= config.snippet_length_tolerance:
            delta += 0.1 * (1 - length_diff / config.snippet_length_tolerance)

    return snippet, delta, issues


def count_relevant_words(
    query_words: list[str],
    title_words: set[str],
    snippet_words: set[str],
    domain_config: DomainConfig,
) -> float:
    """Count query words found in the title or snippet tokens.

    A direct hit counts 1.0; every synonym of a query word that appears
    counts 0.8 on top, so a word can be credited twice.
    """
    found = title_words | snippet_words
    relevant = float(sum(1 for word in query_words if word in found))
    for word in query_words:
        for synonym in domain_config.synonyms.get(word, ()):
            if synonym in found:
                relevant += _SYNONYM_CREDIT
    return relevant


def check_relevance(
    result: SearchResult,
    query: str,
    domain_config: DomainConfig,
    config: QualityConfig,
) -> tuple[float, list[str]]:
    """Score how many query words the result covers.

    Returns:
        Tuple of ``(delta, issues)``.
    """
    query_words = query.lower().split()
    relevant = count_relevant_words(
        query_words,
        set(result.title.lower().split()),
        set(result.snippet.lower().split()),
        domain_config,
    )
    if not query_words or relevant < domain_config.min_relevant_words:
        return -0.3, [LOW_RELEVANCE]
    return (relevant / len(query_words)) * config.snippet_weight, []


def check_url(
    link: str,
    domain_config: DomainConfig,
    config: QualityConfig,
) -> tuple[float, list[str]]:
    """Rate *link* against the trust tiers; the first matching tier wins.

    Returns:
        Tuple of ``(delta, issues)``.
    """
    lower_link = link.lower()
    if any(p.search(lower_link) for p in domain_config.trusted_domains):
        return 0.7, []
    patterns = config.url_patterns
    if any(p.search(lower_link) for p in patterns.trusted):
        return 0.5, []
    if any(p.search(lower_link) for p in patterns.avoid):
        return -0.5, [LOW_QUALITY_SOURCE]
    if any(p.search(lower_link) for p in patterns.suspicious):
        return -0.3, [SUSPICIOUS_URL]
    return 0.0, []


def is_authority_source(link: str, domain_config: DomainConfig, config: QualityConfig) -> bool:
    """Return True if *link* matches a domain-trusted or globally trusted pattern."""
    lower_link = link.lower()
    return any(p.search(lower_link) for p in domain_config.trusted_domains) or any(
        p.search(lower_link) for p in config.url_patterns.trusted
    )


def check_general_content(
    result: SearchResult,
    query: str,
    config: QualityConfig,
) -> tuple[float, list[str]]:
    """Apply the domain-neutral content heuristics.

    Spam words, query-term density in title and snippet, sentence structure
    and word repetition.

    Returns:
        Tuple of ``(delta, issues)``.
    """
    delta = 0.0
    issues: list[str] = []
    title = result.title.lower()
    snippet = result.snippet.lower()

    if any(word in title or word in snippet for word in config.spam_words):
        issues.append(SPAM_CONTENT)
        delta -= 0.3

    query_words = query.lower().split()
    if query_words:
        title_density = sum(1 for w in query_words if w in title) / len(query_words)
        snippet_density = sum(1 for w in query_words if w in snippet) / len(query_words)
        delta += title_density * 0.3 + snippet_density * 0.2

    if _SENTENCE.fullmatch(result.snippet):
        delta += 0.1
    elif result.snippet[:1].isupper() and _INNER_BOUNDARY.search(result.snippet):
        delta += 0.05

    words = snippet.split()
    if words and len(set(words)) / len(words) < 0.5:
        delta -= 0.1

    return delta, issues


def score_result(
    result: SearchResult,
    query: str,
    config: QualityConfig,
    handlers: dict[QueryDomain, GeneralHandler],
    domain: QueryDomain | None = None,
) -> SearchResult:
    """Score *result* for *query* and return an annotated copy.

    The input is never modified; truncation of an over-long snippet shows
    up only on the returned copy. Malformed results score 0 instead of
    raising.

    Args:
        result:   Result to score.
        query:    Query the result was returned for.
        config:   Active quality config.
        handlers: Domain dispatch table from
            :func:`search_quality.domains.registry.build_handlers`.
        domain:   Pre-detected domain; detected from *query* when omitted.

    Returns:
        Copy of *result* with ``score`` in [0, 1] and ``issues`` set
        (``None`` when there are none).
    """
    if not result.title or not result.link or not result.snippet:
        logger.debug("score.missing_fields", link=result.link[:120])
        return result.model_copy(update={"score": 0.0, "issues": [MISSING_FIELDS]})

    if domain is None:
        domain = detect_domain(query, config)
    domain_config = config.domain_config(domain)
    handler = handlers[domain]

    score = BASE_SCORE
    issues: list[str] = []

    snippet, delta, found = check_length(result, domain_config, config)
    score += delta
    issues.extend(found)
    adjusted = result.model_copy(update={"snippet": snippet}) if snippet != result.snippet else result

    delta, found = check_relevance(adjusted, query, domain_config, config)
    score += delta
    issues.extend(found)

    delta, found = check_url(adjusted.link, domain_config, config)
    score += delta
    issues.extend(found)

    score += handler.validate_content(adjusted)

    delta, found = check_general_content(adjusted, query, config)
    score += delta
    issues.extend(found)

    if domain is QueryDomain.NIM and isinstance(handler, NimHandler):
        score += handler.validate_specific_patterns(adjusted)

    score = _clamp(score)

    if domain is not QueryDomain.GENERAL and is_authority_source(adjusted.link, domain_config, config):
        score = _clamp(score + domain_config.authority_boost)

    return adjusted.model_copy(update={"score": score, "issues": issues or None})
