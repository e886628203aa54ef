"""Stage 1 — Query domain detection."""

from __future__ import annotations

import structlog

from search_quality.domains.registry import DETECTION_ORDER
from search_quality.models import QualityConfig, QueryDomain

logger = structlog.get_logger(__name__)


def detect_domain(query: str, config: QualityConfig) -> QueryDomain:
    """Map *query* to exactly one :class:`QueryDomain`.

    Keyword sets are tested in fixed precedence (medical, javascript, nim);
    the first domain with any keyword contained in the lower-cased query
    wins. Matching is plain substring containment, so ``"who"`` also hits
    ``"whole"``.

    Args:
        query:  Free-text search query.
        config: Quality config holding the domain keyword sets.

    Returns:
        The detected domain, ``QueryDomain.GENERAL`` when nothing matches.
    """
    lower_query = (query or "").lower()
    detected = QueryDomain.GENERAL
    for domain in DETECTION_ORDER:
        keywords = config.domain_config(domain).keywords
        if any(keyword in lower_query for keyword in keywords):
            detected = domain
            break
    logger.debug("domain.detected", query=lower_query[:80], domain=detected.value)
    return detected
