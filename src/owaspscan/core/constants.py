# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Enumerations, severity weights, and threshold constants."""

from enum import IntEnum, StrEnum


class Severity(StrEnum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Language(StrEnum):
    JAVASCRIPT = "JavaScript"
    PYTHON = "Python"
    PHP = "PHP"
    JAVA = "Java"
    C_CPP = "C/C++"
    HTML = "HTML"
    CSS = "CSS"
    GENERAL = "General"


class OwaspCategory(IntEnum):
    """OWASP Top 10 (2021) categories, numbered A01 through A10."""

    BROKEN_ACCESS_CONTROL = 1
    CRYPTOGRAPHIC_FAILURES = 2
    INJECTION = 3
    INSECURE_DESIGN = 4
    SECURITY_MISCONFIGURATION = 5
    VULNERABLE_COMPONENTS = 6
    AUTHENTICATION_FAILURES = 7
    INTEGRITY_FAILURES = 8
    LOGGING_FAILURES = 9
    SSRF = 10

    @property
    def code(self) -> str:
        return f"A{self.value:02d}:2021"

    @property
    def title(self) -> str:
        return CATEGORY_TITLES[self]


class RiskLevel(StrEnum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


CATEGORY_TITLES: dict[OwaspCategory, str] = {
    OwaspCategory.BROKEN_ACCESS_CONTROL: "Broken Access Control",
    OwaspCategory.CRYPTOGRAPHIC_FAILURES: "Cryptographic Failures",
    OwaspCategory.INJECTION: "Injection",
    OwaspCategory.INSECURE_DESIGN: "Insecure Design",
    OwaspCategory.SECURITY_MISCONFIGURATION: "Security Misconfiguration",
    OwaspCategory.VULNERABLE_COMPONENTS: "Vulnerable and Outdated Components",
    OwaspCategory.AUTHENTICATION_FAILURES: "Identification and Authentication Failures",
    OwaspCategory.INTEGRITY_FAILURES: "Software and Data Integrity Failures",
    OwaspCategory.LOGGING_FAILURES: "Security Logging and Monitoring Failures",
    OwaspCategory.SSRF: "Server-Side Request Forgery (SSRF)",
}

SEVERITY_WEIGHTS: dict[Severity, int] = {
    Severity.CRITICAL: 25,
    Severity.HIGH: 15,
    Severity.MEDIUM: 8,
    Severity.LOW: 3,
}

SEVERITY_ORDER: list[Severity] = [
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
]

# Tie-break order for the language classifier, most specific first.
LANGUAGE_PRIORITY: list[Language] = [
    Language.PHP,
    Language.HTML,
    Language.JAVA,
    Language.C_CPP,
    Language.PYTHON,
    Language.JAVASCRIPT,
    Language.CSS,
    Language.GENERAL,
]

MAX_RISK_SCORE = 100
RISK_THRESHOLD_HIGH = 70
RISK_THRESHOLD_MEDIUM = 40

CLASSIFIER_MIN_SCORE = 3
CLASSIFIER_MAX_HITS_PER_MARKER = 15

CLEAN_COMPARISON_LINES = 20

REVIEW_NOTE = "The suggested rewrite is illustrative; review it before use."

# File suffixes analyzed when a directory is scanned or watched.
SOURCE_EXTENSIONS: frozenset[str] = frozenset({
    ".py", ".js", ".mjs", ".cjs", ".jsx", ".ts", ".tsx", ".php", ".java",
    ".c", ".h", ".cc", ".cpp", ".hpp", ".cxx", ".html", ".htm", ".css",
})
