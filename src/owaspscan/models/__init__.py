# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Data models for owaspscan."""

from owaspscan.models.analysis import AnalysisResult
from owaspscan.models.finding import AppliedFix, Finding
from owaspscan.models.source import SourceDocument

__all__ = [
    "AnalysisResult",
    "AppliedFix",
    "Finding",
    "SourceDocument",
]
