"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import pytest

from search_quality.analyzer import SearchQualityAnalyzer
from search_quality.domains.registry import build_handlers, default_quality_config
from search_quality.domains.general import GeneralHandler
from search_quality.models import QualityConfig, QueryDomain, SearchResult


# ---------------------------------------------------------------------------
# Config / analyzer fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quality_config() -> QualityConfig:
    """Built-in default quality config."""
    return default_quality_config()


@pytest.fixture
def handlers(quality_config: QualityConfig) -> dict[QueryDomain, GeneralHandler]:
    """Domain dispatch table built from the default config."""
    return build_handlers(quality_config)


@pytest.fixture
def analyzer() -> SearchQualityAnalyzer:
    """Analyzer with default configuration."""
    return SearchQualityAnalyzer()


# ---------------------------------------------------------------------------
# Result fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def react_result() -> SearchResult:
    """React docs page on effect cleanup."""
    return SearchResult(
        title="useEffect Cleanup - React Docs",
        link="https://react.dev/reference/react/useEffect",
        snippet=(
            "Returning a cleanup function from useEffect lets you clean up resources such "
            "as subscriptions or timers before the component re-renders or unmounts."
        ),
    )


@pytest.fixture
def cdc_result() -> SearchResult:
    """CDC page with a snippet below the medical minimum length."""
    return SearchResult(
        title="COVID-19 vaccine effectiveness",
        link="https://www.cdc.gov/covid/vaccines/effectiveness",
        snippet="Stay safe.",
    )


@pytest.fixture
def garden_results() -> list[SearchResult]:
    """General-domain results for the query ``"garden hose reviews"``."""
    return [
        SearchResult(
            title="Best garden hose reviews of the year",
            link="https://www.example.com/garden-hose-reviews",
            snippet="We tested every garden hose for durability. Our reviews cover kinks and leaks.",
        ),
        SearchResult(
            title="Garden hose reviews: the best of the year",
            link="https://other.example.org/hoses",
            snippet="A roundup of garden hose reviews from real owners, sorted by price.",
        ),
        SearchResult(
            title="Hose reel buying tips",
            link="https://www.example.com/GARDEN-HOSE-REVIEWS",
            snippet="Choosing a reel for your garden hose is simpler than it looks.",
        ),
        SearchResult(
            title="Watering schedules",
            link="https://plants.example.net/watering",
            snippet="how often to water tomatoes and peppers during a dry summer month",
        ),
    ]
