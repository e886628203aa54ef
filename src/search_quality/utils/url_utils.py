"""URL helpers."""

from __future__ import annotations

from urllib.parse import urlparse

# Search-engine pages that show up in scraped result lists but are not results.
_ENGINE_INTERNAL: tuple[str, ...] = (
    "google.com/search",
    "google.com/url?",
)


def extract_domain(url: str) -> str:
    """Return the bare hostname (no port, no ``www.``) for *url*.

    Args:
        url: Any URL string.

    Returns:
        Lowercase hostname, e.g. ``"nim-lang.org"``; empty for unparseable input.
    """
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return host[4:] if host.startswith("www.") else host


def is_search_engine_link(url: str) -> bool:
    """Return True if *url* points at a search-engine result or redirect page."""
    lower_url = url.lower()
    return any(marker in lower_url for marker in _ENGINE_INTERNAL)
