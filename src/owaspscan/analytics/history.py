# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Summary statistics over the analyses run in one session."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from owaspscan.core.constants import SEVERITY_ORDER
from owaspscan.models.analysis import AnalysisResult

logger = logging.getLogger("owaspscan.analytics.history")

RECENT_RESULTS = 3


@dataclass(frozen=True, slots=True)
class HistorySummary:
    """Aggregate view of a sequence of analyses."""

    analyses_run: int = 0
    total_issues: int = 0
    average_risk_score: int = 0
    clean_scans: int = 0
    severity_distribution: dict[str, int] = field(default_factory=dict)
    category_distribution: list[tuple[str, int]] = field(default_factory=list)
    recent: tuple[AnalysisResult, ...] = ()


def summarize(results: Iterable[AnalysisResult]) -> HistorySummary:
    """Compute a :class:`HistorySummary`.

    The severity distribution lists every severity (zero counts included);
    the category distribution is sorted by count descending, then by code.
    ``recent`` holds the last three results, newest first.
    """
    items = list(results)
    if not items:
        return HistorySummary(severity_distribution={s.value: 0 for s in SEVERITY_ORDER})

    severities: Counter[str] = Counter()
    categories: Counter[str] = Counter()
    for result in items:
        for finding in result.findings:
            severities[finding.severity.value] += 1
            categories[finding.category.title] += 1

    total_issues = sum(len(r.findings) for r in items)
    average = round(sum(r.risk_score for r in items) / len(items))

    return HistorySummary(
        analyses_run=len(items),
        total_issues=total_issues,
        average_risk_score=average,
        clean_scans=sum(1 for r in items if r.is_clean),
        severity_distribution={s.value: severities.get(s.value, 0) for s in SEVERITY_ORDER},
        category_distribution=sorted(categories.items(), key=lambda kv: (-kv[1], kv[0])),
        recent=tuple(reversed(items[-RECENT_RESULTS:])),
    )


class AnalysisHistory:
    """In-memory, request-scoped list of analysis results. Nothing is persisted."""

    def __init__(self) -> None:
        self._results: list[AnalysisResult] = []

    def add(self, result: AnalysisResult) -> None:
        self._results.append(result)
        logger.debug("History now holds %d analyses", len(self._results))

    def clear(self) -> None:
        self._results.clear()

    @property
    def results(self) -> tuple[AnalysisResult, ...]:
        return tuple(self._results)

    def summary(self) -> HistorySummary:
        return summarize(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[AnalysisResult]:
        return iter(self._results)
