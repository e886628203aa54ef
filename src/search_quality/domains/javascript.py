"""JavaScript / web-development domain handler."""

from __future__ import annotations

import re

from search_quality.domains.general import (
    GeneralHandler,
    SourceRule,
    contains_any,
    match_any,
)
from search_quality.models import SearchResult, SourceType

PRACTICAL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"example|demo|tutorial|how.to|guide", re.I),
    re.compile(r"step.by.step|walkthrough", re.I),
    re.compile(r"best.practices|tips|tricks", re.I),
    re.compile(r"beginner|advanced|intermediate", re.I),
)

CODE_MARKUP = re.compile(r"```|`[^`]+`|<code>|<pre>", re.I)

ECOSYSTEM_TERMS: tuple[str, ...] = (
    "npm", "yarn", "webpack", "babel", "eslint", "typescript",
    "react", "vue", "angular", "node.js", "express", "next.js",
)

FRAMEWORK_TERMS: tuple[str, ...] = (
    "react", "vue", "angular", "svelte", "next.js", "nuxt", "express", "solid",
)

JAVASCRIPT_SOURCE_RULES: tuple[SourceRule, ...] = (
    (re.compile(r"github\.com|gitlab\.com|bitbucket\.org"), SourceType.CODE_REPOSITORY),
    (re.compile(r"stackoverflow\.com|stackexchange\.com"), SourceType.QA),
    (
        re.compile(r"developer\.mozilla\.org|/docs/|documentation|(nodejs|typescript-lang|reactjs)\.org"),
        SourceType.DOCUMENTATION,
    ),
    (re.compile(r"medium\.com|dev\.to|blog|freecodecamp\.org"), SourceType.BLOG),
)


class JavaScriptHandler(GeneralHandler):
    """Scores JavaScript, TypeScript and front-end tooling content."""

    domain_name = "javascript"
    code_oriented = True

    advanced_terms = (
        "closure", "prototype", "async", "promise", "generator", "proxy",
        "webpack", "babel", "advanced", "complex", "optimization",
        "performance", "architecture", "design patterns", "microservices",
        "typescript", "decorator", "reflection", "metaprogramming",
    )
    beginner_terms = (
        "variable", "loop", "if", "basic", "intro", "beginner", "start",
        "getting started", "first steps", "fundamentals", "basics",
        "hello world", "simple", "easy", "tutorial for beginners",
    )

    source_rules = JAVASCRIPT_SOURCE_RULES
    code_patterns = (
        re.compile(r"function\s*\([^)]*\)"),
        re.compile(r"=>\s*[{(]"),
        re.compile(r"const\s+\w+\s*="),
        re.compile(r"let\s+\w+\s*="),
        re.compile(r"var\s+\w+\s*="),
        re.compile(r"class\s+\w+"),
        re.compile(r"import\s+.*from"),
        re.compile(r"export\s+(default\s+)?(function|class|const)"),
    )
    code_line_patterns = (
        re.compile(r"function.*\{.*\}"),
        re.compile(r"const.*=.*=>"),
        re.compile(r"\w+\.\w+\([^)]*\)"),
    )
    format_rules = (
        re.compile(r"(function\s+\w+)"),
        re.compile(r"(const\s+\w+\s*=)"),
        re.compile(r"(let\s+\w+\s*=)"),
        re.compile(r"(\w+\.\w+\()"),
        # long object literals
        re.compile(r"(\{[^}]{20,})"),
    )

    def validate_content(self, result: SearchResult) -> float:
        score = 0.0
        title = result.title.lower()
        snippet = result.snippet.lower()

        if contains_any(result.snippet, self.config.code_indicators):
            score += 0.2

        if match_any(PRACTICAL_PATTERNS, f"{result.title} {result.snippet}"):
            score += 0.15

        if CODE_MARKUP.search(result.snippet):
            score += 0.1

        if contains_any(title, ECOSYSTEM_TERMS) or contains_any(snippet, ECOSYSTEM_TERMS):
            score += 0.1

        return score

    def mentions_framework(self, result: SearchResult) -> bool:
        """Return True if *result* names a front-end or server framework."""
        return contains_any(f"{result.title} {result.snippet}".lower(), FRAMEWORK_TERMS)
