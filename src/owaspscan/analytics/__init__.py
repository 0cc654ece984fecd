# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Request-scoped analysis history and summary statistics."""

from owaspscan.analytics.history import AnalysisHistory, HistorySummary, summarize

__all__ = [
    "AnalysisHistory",
    "HistorySummary",
    "summarize",
]
