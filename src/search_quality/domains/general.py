"""General-purpose domain handler — the fallback and the base handler contract."""

from __future__ import annotations

import re

from search_quality.models import Difficulty, DomainConfig, SearchResult, SourceType

# (pattern, outcome) pairs, evaluated in order; first match wins.
SourceRule = tuple[re.Pattern[str], SourceType]

_MULTI_NEWLINE = re.compile(r"\n{3,}")

GENERAL_SOURCE_RULES: tuple[SourceRule, ...] = (
    (re.compile(r"(news|cnn|bbc|reuters|ap\.org|npr\.org)"), SourceType.NEWS),
    (re.compile(r"\.(edu|ac\.[a-z]{2})$"), SourceType.DOCUMENTATION),
    (re.compile(r"blog|medium\.com"), SourceType.BLOG),
)

# Formatted code: fences, inline code of 3+ chars, HTML code / pre blocks.
FORMATTED_CODE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"```[\s\S]*?```"),
    re.compile(r"`[^`\n]{3,}`"),
    re.compile(r"<code>[\s\S]*?</code>"),
    re.compile(r"<pre>[\s\S]*?</pre>"),
)


def contains_any(text: str, terms: tuple[str, ...]) -> bool:
    """Return True if any of *terms* is a substring of *text*."""
    return any(term in text for term in terms)


def count_terms(text: str, terms: tuple[str, ...]) -> int:
    """Return how many of *terms* occur as substrings of *text*."""
    return sum(1 for term in terms if term in text)


def match_any(patterns: tuple[re.Pattern[str], ...], *texts: str) -> bool:
    """Return True if any pattern matches anywhere in any of *texts*."""
    return any(pattern.search(text) for pattern in patterns for text in texts)


class GeneralHandler:
    """Heuristics shared by every domain.

    Subclasses override the term tables and rule tables, and the methods
    whose logic is domain specific. The general handler adds no content
    bonus of its own: sentence structure and repetition are already scored
    for every domain by the quality scorer.

    Args:
        config: Domain section of the active :class:`QualityConfig`.
    """

    domain_name = "general"
    code_oriented = False

    advanced_terms: tuple[str, ...] = ("advanced", "complex", "sophisticated", "expert")
    intermediate_terms: tuple[str, ...] = ()
    beginner_terms: tuple[str, ...] = ("basic", "simple", "intro", "beginner", "getting started")

    source_rules: tuple[SourceRule, ...] = GENERAL_SOURCE_RULES
    code_patterns: tuple[re.Pattern[str], ...] = ()
    code_line_patterns: tuple[re.Pattern[str], ...] = ()
    format_rules: tuple[re.Pattern[str], ...] = ()

    def __init__(self, config: DomainConfig) -> None:
        self.config = config

    # ------------------------------------------------------------------ #
    # Capability set                                                      #
    # ------------------------------------------------------------------ #

    def validate_content(self, result: SearchResult) -> float:
        """Return the domain-specific content delta for *result*."""
        return 0.0

    def estimate_difficulty(self, result: SearchResult) -> Difficulty:
        """Classify *result* by counting tiered terms in title and snippet.

        Advanced terms take precedence over beginner terms.
        """
        content = f"{result.title} {result.snippet}".lower()
        if count_terms(content, self.advanced_terms) >= 2:
            return Difficulty.ADVANCED
        if count_terms(content, self.beginner_terms) >= 1:
            return Difficulty.BEGINNER
        return Difficulty.INTERMEDIATE

    def detect_source_type(self, url: str) -> SourceType:
        """Return the first matching :class:`SourceType` for *url*."""
        lower_url = url.lower()
        for pattern, source_type in self.source_rules:
            if pattern.search(lower_url):
                return source_type
        return SourceType.TUTORIAL

    def has_code_content(self, snippet: str) -> bool:
        """Return True if *snippet* contains recognisable source code."""
        return match_any(self.code_patterns, snippet)

    def detect_code_examples(self, snippet: str) -> bool:
        """Return True if *snippet* contains a formatted or structural code example."""
        return match_any(FORMATTED_CODE_PATTERNS, snippet) or match_any(
            self.code_line_patterns, snippet
        )

    def format_snippet(self, snippet: str) -> str:
        """Break *snippet* before code keywords for readability.

        Only whitespace is inserted; the text itself is unchanged.
        """
        formatted = snippet
        for pattern in self.format_rules:
            formatted = pattern.sub(r"\n\1", formatted)
        formatted = formatted.strip()
        return _MULTI_NEWLINE.sub("\n\n", formatted)
