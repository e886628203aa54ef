"""Default domain configurations, global URL patterns and handler dispatch."""

from __future__ import annotations

from search_quality.domains.general import GeneralHandler
from search_quality.domains.javascript import JavaScriptHandler
from search_quality.domains.medical import MedicalHandler
from search_quality.domains.nim import NimHandler
from search_quality.models import DomainConfig, QualityConfig, QueryDomain, UrlPatterns

# Host prefix shared by most link patterns: optional chain of subdomains.
_HOST = r"^https?://([a-zA-Z0-9-]+\.)*"

MEDICAL_CONFIG = DomainConfig(
    min_title_length=3,
    min_snippet_length=15,
    min_relevant_words=1,
    authority_boost=0.8,
    keywords=(
        "covid", "health", "medical", "disease", "study", "research",
        "clinical", "treatment", "diagnosis", "cdc", "who", "vaccine",
        "pandemic", "virus", "prevention", "guidelines", "therapy",
        "patient", "hospital", "medicine", "pharmaceutical", "drug",
        "symptom", "infection", "outbreak", "epidemic", "public health",
    ),
    trusted_domains=(
        _HOST + r"(cdc|nih|who|fda|cms)\.gov",
        _HOST + r"pubmed\.ncbi\.nlm\.nih\.gov",
        _HOST + r"(nature|science)\.com",
        _HOST + r"(nejm|jamanetwork|bmj|thelancet)\.com",
        _HOST + r"(mayoclinic|clevelandclinic|jhopkins)\.(?:com|org|edu)",
        _HOST + r"(webmd|healthline|medicalnewstoday)\.com",
        _HOST + r"(ama-assn|aafp|acog)\.org",
    ),
    synonyms={
        "covid": ("coronavirus", "sars-cov-2", "pandemic", "covid-19"),
        "health": ("medical", "healthcare", "wellness", "medicine"),
        "study": ("research", "trial", "investigation", "analysis"),
        "guidelines": ("recommendations", "protocols", "standards", "practices"),
    },
)

JAVASCRIPT_CONFIG = DomainConfig(
    min_title_length=3,
    min_snippet_length=20,
    min_relevant_words=1,
    authority_boost=0.8,
    keywords=(
        "javascript", "js", "typescript", "node", "react", "vue", "angular",
        "function", "async", "promise", "callback", "closure", "prototype",
        "dom", "api", "framework", "library", "npm", "webpack", "babel",
        "tips", "tricks", "best practices", "tutorial", "guide", "example",
        "esm", "cjs", "module", "package.json", "eslint", "prettier",
        "jest", "cypress", "vitest", "rollup", "vite", "parcel",
    ),
    code_indicators=(
        "function", "=>", "const", "let", "var", "class", "import", "export",
        "{", "}", "()", "[]",
    ),
    trusted_domains=(
        _HOST + r"(developer\.mozilla\.org|mdn\.)",
        _HOST + r"(javascript\.info)",
        _HOST + r"(nodejs\.org)",
        _HOST + r"(typescript-lang\.org)",
        _HOST + r"(freecodecamp\.org)",
        _HOST + r"(dev\.to)",
        _HOST + r"github\.com",
        _HOST + r"stackoverflow\.com",
        _HOST + r"(babeljs\.io)",
        _HOST + r"(vitejs\.dev)",
        _HOST + r"(jestjs\.io)",
        _HOST + r"(eslint\.org)",
    ),
    synonyms={
        "javascript": ("js", "ecmascript", "node.js", "nodejs"),
        "function": ("method", "procedure", "callback"),
        "async": ("asynchronous", "promise", "await"),
        "tips": ("tricks", "hacks", "best practices", "patterns"),
    },
)

NIM_CONFIG = DomainConfig(
    min_title_length=3,
    min_snippet_length=20,
    min_relevant_words=1,
    authority_boost=0.8,
    keywords=(
        "nim", "nim-lang", "nimrod", "nimble", "nimsuggest", "nimscript",
        "proc", "template", "macro", "iterator", "converter", "method",
        "var", "let", "const", "type", "object", "ref", "ptr", "seq",
        "array", "string", "int", "float", "bool", "char", "range",
        "gc", "memory management", "compile time", "metaprogramming",
        "async", "threading", "channels", "parallelism", "performance",
        "systems programming", "zero cost", "manual memory",
    ),
    code_indicators=(
        "proc", "func", "template", "macro", "iterator", "converter",
        "var", "let", "const", "type", "when", "case", "of", "elif",
        "discard", "result", "return", "yield", "break", "continue",
        "import", "include", "from", "export", "echo", "new", "addr",
    ),
    trusted_domains=(
        _HOST + r"nim-lang\.org",
        _HOST + r"nim-lang\.github\.io",
        _HOST + r"forum\.nim-lang\.org",
        _HOST + r"github\.com/nim-lang",
        _HOST + r"nimble\.directory",
        r"(?i)" + _HOST + r"rosettacode\.org.*nim",
        r"(?i)" + _HOST + r"stackoverflow\.com.*nim",
        r"(?i)" + _HOST + r"reddit\.com/r/nim",
        r"(?i)" + _HOST + r"dev\.to.*nim",
    ),
    synonyms={
        "nim": ("nim-lang", "nimrod"),
        "proc": ("procedure", "function", "def"),
        "template": ("generic", "metaprogramming"),
        "macro": ("metaprogramming", "compile-time"),
        "seq": ("sequence", "array", "list"),
        "async": ("asynchronous", "await", "future"),
        "gc": ("garbage collector", "memory management"),
        "performance": ("speed", "fast", "efficient", "optimization"),
    },
)

GENERAL_CONFIG = DomainConfig(
    min_title_length=5,
    min_snippet_length=30,
    min_relevant_words=1,
    authority_boost=0.3,
)

URL_PATTERNS = UrlPatterns(
    trusted=(
        _HOST + r"(edu|ac\.[a-z]{2})$",
        _HOST + r"(gov|mil)$",
        _HOST + r"wikipedia\.org",
        _HOST + r"github\.com",
        _HOST + r"stackoverflow\.com",
    ),
    suspicious=(
        r"\.(php|cgi|jsp)\?",
        r"(?i)\b(ads?|click|buy|sale|cheap|free|deal)\b",
    ),
    avoid=(
        # Tutorial mills
        _HOST + r"w3schools\.com",
        _HOST + r"tutorialspoint\.com",
        _HOST + r"geeksforgeeks\.org",
        _HOST + r"javatpoint\.com",
    ),
)

SPAM_WORDS: tuple[str, ...] = ("spam", "advertisement", "promoted", "sponsored")

# Detection precedence: first domain whose keywords hit wins.
DETECTION_ORDER: tuple[QueryDomain, ...] = (
    QueryDomain.MEDICAL,
    QueryDomain.JAVASCRIPT,
    QueryDomain.NIM,
)

HANDLER_TYPES: dict[QueryDomain, type[GeneralHandler]] = {
    QueryDomain.MEDICAL: MedicalHandler,
    QueryDomain.JAVASCRIPT: JavaScriptHandler,
    QueryDomain.NIM: NimHandler,
    QueryDomain.GENERAL: GeneralHandler,
}


def default_quality_config() -> QualityConfig:
    """Return a fresh :class:`QualityConfig` holding the built-in defaults."""
    return QualityConfig(
        spam_words=SPAM_WORDS,
        url_patterns=URL_PATTERNS,
        medical=MEDICAL_CONFIG,
        javascript=JAVASCRIPT_CONFIG,
        nim=NIM_CONFIG,
        general=GENERAL_CONFIG,
    )


def build_handlers(config: QualityConfig) -> dict[QueryDomain, GeneralHandler]:
    """Instantiate one handler per domain from the dispatch table.

    Args:
        config: Quality config whose domain sections feed the handlers.

    Returns:
        Dict mapping every :class:`QueryDomain` to its handler.
    """
    return {
        domain: handler_type(config.domain_config(domain))
        for domain, handler_type in HANDLER_TYPES.items()
    }
