"""Medical domain handler."""

from __future__ import annotations

import re

from search_quality.domains.general import GeneralHandler, SourceRule, contains_any, match_any
from search_quality.models import SearchResult, SourceType

MEDICAL_INDICATORS: tuple[str, ...] = (
    "study", "research", "clinical", "trial", "patient", "treatment",
    "diagnosis", "therapy", "prevention", "symptoms", "healthcare",
    "medicine", "medical", "hospital", "doctor", "physician",
    "epidemiology", "public health", "infectious", "disease",
)

AUTHORITATIVE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"according to.*(cdc|who|nih|fda)", re.I),
    re.compile(r"published in.*(nature|nejm|jama|bmj|lancet)", re.I),
    re.compile(r"researchers? (found|discovered|concluded)", re.I),
    re.compile(r"(clinical trial|randomized|peer.reviewed)", re.I),
    re.compile(r"(meta.analysis|systematic review)", re.I),
    re.compile(r"\b(rct|randomized controlled trial)\b", re.I),
)

EVIDENCE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"evidence.based|evidence.shows", re.I),
    re.compile(r"statistically significant", re.I),
    re.compile(r"peer.reviewed|peer reviewed", re.I),
    re.compile(r"systematic.review|meta.analysis", re.I),
)

MEDICAL_SOURCE_RULES: tuple[SourceRule, ...] = (
    (re.compile(r"\.(gov|edu)$"), SourceType.MEDICAL_AUTHORITY),
    (
        re.compile(r"(cdc|nih|who|fda|pubmed|nature|nejm|jama|bmj|lancet|mayoclinic)"),
        SourceType.MEDICAL_AUTHORITY,
    ),
)


class MedicalHandler(GeneralHandler):
    """Scores clinical and public-health content."""

    domain_name = "medical"

    advanced_terms = (
        "pathophysiology", "pharmacokinetics", "meta-analysis",
        "randomized controlled", "systematic review", "clinical trial",
        "biomarker", "genomics", "proteomics", "molecular",
        "biochemistry", "immunology", "epidemiology",
    )
    beginner_terms = (
        "overview", "introduction", "basics", "what is",
        "simple explanation", "general information", "symptoms",
        "common", "everyday", "patient guide",
    )

    source_rules = MEDICAL_SOURCE_RULES

    def validate_content(self, result: SearchResult) -> float:
        score = 0.0
        title = result.title.lower()
        snippet = result.snippet.lower()

        if contains_any(title, MEDICAL_INDICATORS) or contains_any(snippet, MEDICAL_INDICATORS):
            score += 0.15

        if match_any(AUTHORITATIVE_PATTERNS, result.title, result.snippet):
            score += 0.2

        if match_any(EVIDENCE_PATTERNS, result.title, result.snippet):
            score += 0.1

        return score

    def is_evidence_based(self, result: SearchResult) -> bool:
        """Return True if *result* uses evidence-based or peer-review language."""
        return match_any(EVIDENCE_PATTERNS, result.title, result.snippet) or match_any(
            AUTHORITATIVE_PATTERNS, result.title, result.snippet
        )
