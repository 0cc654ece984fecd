# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""owaspscan - OWASP Top 10 static analysis and remediation engine."""

__version__ = "0.1.0"

from owaspscan.models.analysis import AnalysisResult
from owaspscan.sdk import analyze, analyze_file, compare, validate_source

__all__ = [
    "AnalysisResult",
    "__version__",
    "analyze",
    "analyze_file",
    "compare",
    "validate_source",
]
