"""Stage 4 — Metadata enrichment and snippet clean-up."""

from __future__ import annotations

import re

from search_quality.domains.general import GeneralHandler
from search_quality.models import ContentLength, SearchResult

_LONG_SNIPPET = 200
_MEDIUM_SNIPPET = 100

_INLINE_WHITESPACE = re.compile(r"[ \t\r\f\v]+")
_LEADING_ELLIPSIS = re.compile(r"^\s*(\.\.\.|…)\s*")
_TRAILING_ELLIPSIS = re.compile(r"\s*(\.\.\.|…)\s*$")


def content_length(snippet: str) -> ContentLength:
    """Bucket *snippet* by character count."""
    if len(snippet) > _LONG_SNIPPET:
        return ContentLength.LONG
    if len(snippet) > _MEDIUM_SNIPPET:
        return ContentLength.MEDIUM
    return ContentLength.SHORT


def enrich_result(result: SearchResult, handler: GeneralHandler) -> SearchResult:
    """Return a copy of *result* annotated with source, difficulty and length metadata.

    ``has_code_examples`` is only filled in for code-oriented domains and
    stays ``None`` elsewhere.

    Args:
        result:  Result to annotate (usually already scored).
        handler: Handler of the query's domain.
    """
    update = {
        "source_type": handler.detect_source_type(result.link),
        "difficulty": handler.estimate_difficulty(result),
        "content_length": content_length(result.snippet),
    }
    if handler.code_oriented:
        update["has_code_examples"] = handler.detect_code_examples(result.snippet)
    return result.model_copy(update=update)


def enhance_snippet(result: SearchResult, handler: GeneralHandler) -> SearchResult:
    """Return a copy of *result* with a tidied, readably formatted snippet.

    Inline whitespace runs collapse to one space and a leading or trailing
    ellipsis is dropped before the handler inserts its code line breaks.
    """
    snippet = _INLINE_WHITESPACE.sub(" ", result.snippet)
    snippet = _LEADING_ELLIPSIS.sub("", snippet)
    snippet = _TRAILING_ELLIPSIS.sub("", snippet)
    return result.model_copy(update={"snippet": handler.format_snippet(snippet.strip())})
