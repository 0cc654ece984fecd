# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for session history statistics and the comparison view."""

from __future__ import annotations

from owaspscan.analytics import AnalysisHistory, summarize
from owaspscan.core.constants import Language
from owaspscan.models.analysis import AnalysisResult
from owaspscan.scanner.diff import build_comparison

# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


def _clean(score: int = 0) -> AnalysisResult:
    return AnalysisResult(language=Language.GENERAL, risk_score=score, secure_code="")


class TestSummarize:
    def test_empty(self) -> None:
        summary = summarize([])
        assert summary.analyses_run == 0
        assert summary.total_issues == 0
        assert summary.average_risk_score == 0
        assert summary.severity_distribution == {"Critical": 0, "High": 0, "Medium": 0, "Low": 0}
        assert summary.category_distribution == []
        assert summary.recent == ()

    def test_counts(self, pipeline, vulnerable_dir, clean_dir) -> None:
        vulnerable = pipeline.analyze((vulnerable_dir / "app.py").read_text(encoding="utf-8"))
        clean = pipeline.analyze((clean_dir / "add.py").read_text(encoding="utf-8"))
        summary = summarize([vulnerable, clean])

        assert summary.analyses_run == 2
        assert summary.clean_scans == 1
        assert summary.total_issues == len(vulnerable.findings)
        assert summary.average_risk_score == round(vulnerable.risk_score / 2)
        assert sum(summary.severity_distribution.values()) == len(vulnerable.findings)
        counts = [count for _, count in summary.category_distribution]
        assert counts == sorted(counts, reverse=True)
        assert summary.recent == (clean, vulnerable)

    def test_recent_keeps_last_three_newest_first(self) -> None:
        results = [_clean(score) for score in (1, 2, 3, 4)]
        assert [r.risk_score for r in summarize(results).recent] == [4, 3, 2]


class TestAnalysisHistory:
    def test_add_and_clear(self) -> None:
        history = AnalysisHistory()
        history.add(_clean(10))
        history.add(_clean(20))
        assert len(history) == 2
        assert [r.risk_score for r in history] == [10, 20]
        assert history.summary().average_risk_score == 15
        history.clear()
        assert len(history) == 0
        assert history.results == ()


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def _numbered(total: int, findings_at: dict[int, str]) -> str:
    lines = [findings_at.get(n, f"x{n} = {n}") for n in range(1, total + 1)]
    return "\n".join(lines) + "\n"


class TestComparison:
    def test_clean_shows_first_lines(self, pipeline) -> None:
        code = _numbered(30, {})
        result = pipeline.analyze(code)
        comparison = build_comparison(code, result)
        assert comparison.clean
        assert len(comparison.sections) == 1
        section = comparison.sections[0]
        assert (section.original_start, section.original_end) == (1, 20)
        assert section.original_lines == section.secure_lines

    def test_nearby_findings_merge(self, pipeline) -> None:
        code = _numbered(30, {10: "eval(a)", 12: "eval(b)"})
        result = pipeline.analyze(code)
        comparison = build_comparison(code, result, context_lines=3)
        assert not comparison.clean
        assert len(comparison.sections) == 1
        section = comparison.sections[0]
        assert (section.original_start, section.original_end) == (7, 15)
        assert (section.secure_start, section.secure_end) == (7, 17)
        assert section.rule_ids == ("OWASP-A03-005",)
        assert "eval(a)" in section.secure_lines

    def test_distant_findings_split(self, pipeline) -> None:
        code = _numbered(30, {3: "eval(a)", 25: "eval(b)"})
        result = pipeline.analyze(code)
        comparison = build_comparison(code, result, context_lines=2)
        assert [(s.original_start, s.original_end) for s in comparison.sections] == [(1, 5), (23, 27)]
        assert [(s.secure_start, s.secure_end) for s in comparison.sections] == [(1, 6), (24, 29)]

    def test_zero_context(self, pipeline) -> None:
        code = _numbered(5, {3: "eval(a)"})
        result = pipeline.analyze(code)
        section = build_comparison(code, result, context_lines=0).sections[0]
        assert section.original_lines == ("eval(a)",)
        assert section.secure_lines[-1] == "eval(a)"
        assert section.secure_lines[0].startswith("# SECURITY:")
