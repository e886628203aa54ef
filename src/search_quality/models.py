"""Pydantic v2 data models for the search quality pipeline."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class QueryDomain(str, Enum):
    """Subject-matter category that selects the heuristic set."""

    MEDICAL = "medical"
    JAVASCRIPT = "javascript"
    NIM = "nim"
    GENERAL = "general"


class SourceType(str, Enum):
    DOCUMENTATION = "Documentation"
    TUTORIAL = "Tutorial"
    QA = "Q&A"
    CODE_REPOSITORY = "Code Repository"
    BLOG = "Blog"
    MEDICAL_AUTHORITY = "Medical Authority"
    NEWS = "News"


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class ContentLength(str, Enum):
    SHORT = "Short"
    MEDIUM = "Medium"
    LONG = "Long"


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------


class SearchResult(BaseModel):
    """A single search result as produced upstream, plus pipeline annotations.

    Upstream fills ``title``, ``link`` and ``snippet``; every other field is
    attached by scoring or enrichment on a copy of the record.
    """

    title: str = ""
    link: str = ""
    snippet: str = ""
    score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    issues: Optional[list[str]] = None
    source_type: Optional[SourceType] = None
    has_code_examples: Optional[bool] = None
    difficulty: Optional[Difficulty] = None
    content_length: Optional[ContentLength] = None
    last_updated: Optional[str] = None

    @field_validator("title", "link", "snippet", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:  # noqa: ANN401
        return "" if value is None else value


class UpstreamResponse(BaseModel):
    """Raw output of the page-fetching collaborator for one query."""

    query: str
    results: list[SearchResult] = Field(default_factory=list)
    success: bool = True
    duration_ms: Optional[float] = None
    error: Optional[str] = None


# ---------------------------------------------------------------------------
# Configuration models
# ---------------------------------------------------------------------------


class DomainConfig(BaseModel):
    """Per-domain tunables. Patterns are compiled when the model is built."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_title_length: int = Field(ge=0)
    min_snippet_length: int = Field(ge=0)
    min_relevant_words: float = Field(ge=0)
    authority_boost: float = Field(ge=0.0, le=1.0)
    keywords: tuple[str, ...] = ()
    trusted_domains: tuple[re.Pattern[str], ...] = ()
    code_indicators: tuple[str, ...] = ()
    synonyms: dict[str, tuple[str, ...]] = Field(default_factory=dict)


class UrlPatterns(BaseModel):
    """Global link patterns, each list evaluated in order."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    trusted: tuple[re.Pattern[str], ...] = ()
    suspicious: tuple[re.Pattern[str], ...] = ()
    avoid: tuple[re.Pattern[str], ...] = ()


class QualityConfig(BaseModel):
    """Global scoring tunables plus one :class:`DomainConfig` per domain.

    ``title_weight + snippet_weight + url_weight`` is conceptually 1.0 but
    not enforced. Build customised copies with :meth:`with_overrides`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_snippet_length: int = Field(default=800, gt=0)
    ideal_snippet_length: int = Field(default=300, ge=0)
    snippet_length_tolerance: int = Field(default=50, gt=0)
    title_weight: float = 0.35
    snippet_weight: float = 0.4
    url_weight: float = 0.25
    spam_words: tuple[str, ...] = ()
    url_patterns: UrlPatterns = Field(default_factory=UrlPatterns)

    medical: DomainConfig
    javascript: DomainConfig
    nim: DomainConfig
    general: DomainConfig

    def domain_config(self, domain: QueryDomain) -> DomainConfig:
        """Return the :class:`DomainConfig` for *domain*."""
        return getattr(self, QueryDomain(domain).value)

    def with_overrides(self, overrides: dict[str, Any]) -> "QualityConfig":
        """Return a new config with *overrides* applied.

        Top-level keys replace the current value. A mapping given for a
        domain config or for ``url_patterns`` is merged into the current
        one, so ``{"medical": {"authority_boost": 0.5}}`` keeps every other
        medical setting.

        Raises:
            pydantic.ValidationError: If the merged config is invalid
                (bad regex, unknown key, out-of-range value).
        """
        merged = self.model_dump()
        for key, value in overrides.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = {**current, **value}
            else:
                merged[key] = value
        return QualityConfig.model_validate(merged)


# ---------------------------------------------------------------------------
# Reporting models
# ---------------------------------------------------------------------------


class QualityStats(BaseModel):
    """Aggregate statistics over a result list."""

    total_results: int
    average_score: float
    high_quality_count: int
    source_type_distribution: dict[str, int] = Field(default_factory=dict)
    common_issues: dict[str, int] = Field(default_factory=dict)
    domain: Optional[QueryDomain] = None
    domain_stats: dict[str, int] = Field(default_factory=dict)


class DomainInsights(BaseModel):
    """Human-readable coverage summary for one query."""

    domain: QueryDomain
    insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# API models
# ---------------------------------------------------------------------------


class AnalyzeRequest(BaseModel):
    """Body of ``POST /analyze``."""

    query: str = Field(..., min_length=1, max_length=512)
    results: list[SearchResult] = Field(default_factory=list)
    min_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    enhance_snippets: bool = False


class AnalysisResponse(BaseModel):
    """Output of one full analysis run."""

    query: str
    domain: QueryDomain
    min_score: float
    results: list[SearchResult]
    stats: QualityStats
    insights: DomainInsights
    query_time_ms: float


class ScoreRequest(BaseModel):
    """Body of ``POST /score``."""

    query: str = Field(..., min_length=1, max_length=512)
    result: SearchResult


class DomainResponse(BaseModel):
    query: str
    domain: QueryDomain


class HealthResponse(BaseModel):
    """Response from GET /health."""

    status: str
    environment: str
    uptime_seconds: float
