"""Nim systems-programming language domain handler."""

from __future__ import annotations

import re

from search_quality.domains.general import (
    GeneralHandler,
    SourceRule,
    contains_any,
    count_terms,
    match_any,
)
from search_quality.models import Difficulty, SearchResult, SourceType

NIM_CONCEPTS: tuple[str, ...] = (
    "compile time", "zero cost", "manual memory", "gc:none",
    "metaprogramming", "ast", "hygiene", "gensym", "quote",
    "untyped", "typed", "static", "concepts", "generics",
    "nim-lang", "nimble", "nimsuggest", "nimscript",
)

PRACTICAL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"example|demo|tutorial|how.to|guide", re.I),
    re.compile(r"step.by.step|walkthrough", re.I),
    re.compile(r"best.practices|tips|tricks|patterns", re.I),
    re.compile(r"beginner|getting.started|introduction", re.I),
    re.compile(r"advanced|expert|deep.dive", re.I),
)

CODE_MARKUP = re.compile(r"```nim|```\s*nim|<code>|<pre>", re.I)

ECOSYSTEM_TERMS: tuple[str, ...] = (
    "nimble", "karax", "jester", "prologue", "asynchttpserver",
    "parseutils", "strutils", "sequtils", "tables", "sets",
    "json", "yaml", "xml", "regex", "unittest", "testament",
    "fusion", "synthesis", "pkg", "nimgen", "c2nim",
)

PERFORMANCE_TERMS: tuple[str, ...] = (
    "performance", "speed", "fast", "efficient", "benchmark",
    "systems programming", "low level", "embedded", "gamedev",
    "scientific computing", "hpc", "parallel",
)

IDIOMATIC_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"proc.*:\s*(void|auto|untyped)"),
    re.compile(r"template.*:\s*untyped"),
    re.compile(r"macro.*:\s*untyped"),
    re.compile(r"when\s+defined\("),
    re.compile(r"when\s+compiles\("),
    re.compile(r"static:\s*assert"),
    re.compile(r"result\s*="),
    re.compile(r"discard\s+"),
)

COMPILATION_TARGETS: tuple[str, ...] = (
    "c backend", "cpp backend", "js backend", "compile to c",
    "compile to javascript", "cross platform", "embedded",
    "webassembly", "wasm",
)

UNIQUE_FEATURES: tuple[str, ...] = (
    "memory safety", "zero cost abstractions", "compile time execution",
    "hygiene", "gensym", "varargs", "openarray", "concepts",
    "effect system", "exceptions as values", "nil safety",
)

COMPARISON_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"nim\s+vs\s+"),
    re.compile(r"nim\s+compared\s+to"),
    re.compile(r"nim\s+or\s+(python|rust|go|c\+\+|javascript)"),
    re.compile(r"(python|rust|go|c\+\+|javascript)\s+vs\s+nim"),
    re.compile(r"why\s+nim"),
    re.compile(r"choose\s+nim"),
    re.compile(r"nim\s+advantages"),
    re.compile(r"nim\s+benefits"),
)

# Forum threads classify as Q&A: this rule is checked ahead of the broader
# nim-lang.org documentation rule, which would otherwise claim them.
NIM_SOURCE_RULES: tuple[SourceRule, ...] = (
    (re.compile(r"forum\.nim-lang\.org"), SourceType.QA),
    (re.compile(r"nim-lang\.org|nim-lang\.github\.io"), SourceType.DOCUMENTATION),
    (re.compile(r"github\.com|gitlab\.com|bitbucket\.org"), SourceType.CODE_REPOSITORY),
    (re.compile(r"stackoverflow\.com|stackexchange\.com"), SourceType.QA),
    (re.compile(r"nimble\.directory"), SourceType.DOCUMENTATION),
    (re.compile(r"medium\.com|dev\.to|blog"), SourceType.BLOG),
    (re.compile(r"rosettacode\.org"), SourceType.CODE_REPOSITORY),
)

_ADVANCED_STRUCTURE = re.compile(r"template|macro|generics|concepts")
_BEGINNER_STRUCTURE = re.compile(r"proc|func|basic|simple")


class NimHandler(GeneralHandler):
    """Scores Nim language content.

    Beyond the shared capabilities it exposes :meth:`validate_specific_patterns`
    and :meth:`is_comparative_content`, which callers reach only after
    narrowing the active handler to this class.
    """

    domain_name = "nim"
    code_oriented = True

    advanced_terms = (
        "metaprogramming", "macro", "template", "ast", "compile time",
        "generics", "concepts", "effects", "gc:none", "manual memory",
        "ptr", "ref", "unsafe", "cast", "converter", "pragmas",
        "advanced", "expert", "complex", "optimization", "performance",
        "systems programming", "low level", "assembly", "ffi",
        "threading", "parallel", "async", "channels", "atomics",
    )
    beginner_terms = (
        "introduction", "getting started", "beginner", "tutorial",
        "first steps", "basics", "fundamentals", "hello world",
        "simple", "easy", "start", "learn nim", "nim tutorial",
        "basic syntax", "variables", "functions", "loops", "conditions",
    )
    intermediate_terms = (
        "object oriented", "modules", "packages", "nimble", "json",
        "files", "strings", "arrays", "sequences", "tables",
        "error handling", "exceptions", "io", "networking",
    )

    source_rules = NIM_SOURCE_RULES
    code_patterns = (
        re.compile(r"proc\s+\w+\s*\("),
        re.compile(r"func\s+\w+\s*\("),
        re.compile(r"template\s+\w+"),
        re.compile(r"macro\s+\w+"),
        re.compile(r"iterator\s+\w+"),
        re.compile(r"converter\s+\w+"),
        re.compile(r"type\s+\w+\s*="),
        re.compile(r"var\s+\w+\s*:"),
        re.compile(r"let\s+\w+\s*="),
        re.compile(r"const\s+\w+\s*="),
        re.compile(r"when\s+\w+:"),
        re.compile(r"case\s+\w+\s+of"),
        re.compile(r"import\s+\w+"),
        re.compile(r"from\s+\w+\s+import"),
        re.compile(r"echo\s+"),
        re.compile(r"result\s*="),
        re.compile(r"discard\s+"),
    )
    fenced_code_patterns: tuple[re.Pattern[str], ...] = (
        re.compile(r"```nim[\s\S]*?```", re.I),
        re.compile(r"```\s*[\s\S]*?(proc|func|template|macro|type)[\s\S]*?```", re.I),
        re.compile(r"<code>[\s\S]*?(proc|func|template|macro)[\s\S]*?</code>", re.I),
        re.compile(r"<pre>[\s\S]*?(proc|func|template|macro)[\s\S]*?</pre>", re.I),
    )
    code_line_patterns = (
        re.compile(r"proc\s+\w+.*="),
        re.compile(r"template\s+\w+.*="),
        re.compile(r"macro\s+\w+.*="),
        re.compile(r"type\s+\w+\s*=\s*(object|enum|ref|ptr)"),
        re.compile(r"when\s+\w+:[\s\S]*?else:"),
        re.compile(r"case\s+\w+\s+of[\s\S]*?else:"),
    )
    format_rules = (
        re.compile(r"(proc\s+\w+)"),
        re.compile(r"(func\s+\w+)"),
        re.compile(r"(template\s+\w+)"),
        re.compile(r"(macro\s+\w+)"),
        re.compile(r"(type\s+\w+\s*=)"),
        re.compile(r"(var\s+\w+)"),
        re.compile(r"(let\s+\w+)"),
        re.compile(r"(const\s+\w+)"),
        re.compile(r"(when\s+\w+:)"),
        re.compile(r"(case\s+\w+\s+of)"),
        re.compile(r"(import\s+\w+)"),
    )

    def validate_content(self, result: SearchResult) -> float:
        score = 0.0
        title = result.title.lower()
        snippet = result.snippet.lower()

        if contains_any(result.snippet, self.config.code_indicators):
            score += 0.25

        if contains_any(title, NIM_CONCEPTS) or contains_any(snippet, NIM_CONCEPTS):
            score += 0.2

        if match_any(PRACTICAL_PATTERNS, f"{result.title} {result.snippet}"):
            score += 0.15

        if CODE_MARKUP.search(result.snippet):
            score += 0.15

        if contains_any(title, ECOSYSTEM_TERMS) or contains_any(snippet, ECOSYSTEM_TERMS):
            score += 0.1

        if contains_any(title, PERFORMANCE_TERMS) or contains_any(snippet, PERFORMANCE_TERMS):
            score += 0.1

        return score

    def estimate_difficulty(self, result: SearchResult) -> Difficulty:
        content = f"{result.title} {result.snippet}".lower()
        advanced = count_terms(content, self.advanced_terms)
        beginner = count_terms(content, self.beginner_terms)
        intermediate = count_terms(content, self.intermediate_terms)

        if advanced >= 2:
            return Difficulty.ADVANCED
        if beginner >= 1 and advanced == 0:
            return Difficulty.BEGINNER
        if intermediate >= 1:
            return Difficulty.INTERMEDIATE

        # Tie-break on the kind of code being discussed.
        if _ADVANCED_STRUCTURE.search(content):
            return Difficulty.ADVANCED
        if _BEGINNER_STRUCTURE.search(content):
            return Difficulty.BEGINNER
        return Difficulty.INTERMEDIATE

    def detect_code_examples(self, snippet: str) -> bool:
        return match_any(self.fenced_code_patterns, snippet) or match_any(
            self.code_line_patterns, snippet
        )

    # ------------------------------------------------------------------ #
    # Nim-only extensions                                                 #
    # ------------------------------------------------------------------ #

    def validate_specific_patterns(self, result: SearchResult) -> float:
        """Return the bonus for idiomatic Nim, compilation targets and unique features."""
        score = 0.0
        content = f"{result.title} {result.snippet}".lower()

        if match_any(IDIOMATIC_PATTERNS, result.snippet):
            score += 0.15

        if contains_any(content, COMPILATION_TARGETS):
            score += 0.1

        if contains_any(content, UNIQUE_FEATURES):
            score += 0.12

        return score

    def is_comparative_content(self, result: SearchResult) -> bool:
        """Return True if *result* frames Nim against another language."""
        content = f"{result.title} {result.snippet}".lower()
        return match_any(COMPARISON_PATTERNS, content)

    def is_official_source(self, url: str) -> bool:
        """Return True for nim-lang.org properties and the nimble directory."""
        lower_url = url.lower()
        return "nim-lang.org" in lower_url or "nim-lang.github.io" in lower_url or (
            "nimble.directory" in lower_url
        )
