# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for the rule scanner and severity scoring."""

from __future__ import annotations

import logging

import pytest

from owaspscan.core.constants import REVIEW_NOTE, Language, OwaspCategory, RiskLevel, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.catalog import RuleCatalog
from owaspscan.detectors.rule_engine.matchers import MatchSpan, line_matcher, predicate_matcher
from owaspscan.models.finding import Finding
from owaspscan.models.source import SourceDocument
from owaspscan.scanner.scanner import scan
from owaspscan.scanner.severity import aggregate_severity, compute_risk_level, compute_risk_score

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _raise(_lines, _index):
    raise RuntimeError("boom")


class _ExplodingRule(BaseRule):
    rule_id = "TEST-BOOM"
    title = "Always fails"
    severity = Severity.LOW
    category = OwaspCategory.INJECTION
    description = "Raises on every line"
    matcher = predicate_matcher(_raise)


class _MarkerRule(BaseRule):
    rule_id = "TEST-MARK"
    title = "Marker"
    severity = Severity.LOW
    category = OwaspCategory.INJECTION
    description = "Matches the word MARK"
    recommendation = "Remove the marker."
    matcher = line_matcher(r"MARK")


class _OverrunRule(BaseRule):
    rule_id = "TEST-OVERRUN"
    title = "Overrun"
    severity = Severity.LOW
    category = OwaspCategory.INJECTION
    description = "Reports a span past the end of the document"
    matcher = predicate_matcher(lambda lines, index: MatchSpan(index, index + 5, lines[index]))


def _finding(severity: Severity, line: int = 1) -> Finding:
    return Finding(
        rule_id="TEST-001",
        type="Injection: test",
        category=OwaspCategory.INJECTION,
        severity=severity,
        line=line,
        line_end=line,
        description="test",
    )


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


class TestScan:
    def test_findings_sorted_by_line_then_catalog_order(self, catalog) -> None:
        doc = SourceDocument('x = 1\nos.system("rm " + request.args.get("f"))\n')
        findings = scan(doc, Language.GENERAL, catalog)
        assert [(f.line, f.rule_id) for f in findings] == [
            (2, "OWASP-A03-004"),
            (2, "OWASP-A04-001"),
        ]

    def test_finding_fields(self, catalog) -> None:
        findings = scan(SourceDocument("app.run(debug=True)"), Language.PYTHON, catalog)
        assert len(findings) == 1
        f = findings[0]
        assert f.type == "Security Misconfiguration: Debug mode enabled"
        assert f.category == OwaspCategory.SECURITY_MISCONFIGURATION
        assert f.category_code == "A05:2021"
        assert f.severity == Severity.MEDIUM
        assert (f.line, f.line_end) == (1, 1)
        assert f.code_snippet == "app.run(debug=True)"
        assert f.recommendation.endswith(REVIEW_NOTE)

    def test_empty_document(self, catalog) -> None:
        assert scan(SourceDocument(""), Language.GENERAL, catalog) == []

    def test_clean_document(self, catalog) -> None:
        doc = SourceDocument("def add(a, b):\n    return a + b\n")
        assert scan(doc, Language.PYTHON, catalog) == []

    def test_failing_rule_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        catalog = RuleCatalog([_ExplodingRule(), _MarkerRule()])
        with caplog.at_level(logging.WARNING, logger="owaspscan.scanner"):
            findings = scan(SourceDocument("MARK\nother"), Language.GENERAL, catalog)
        assert [f.rule_id for f in findings] == ["TEST-MARK"]
        assert "TEST-BOOM" in caplog.text

    def test_span_clamped_to_last_line(self) -> None:
        catalog = RuleCatalog([_OverrunRule()])
        findings = scan(SourceDocument("a\nb"), Language.GENERAL, catalog)
        assert [(f.line, f.line_end) for f in findings] == [(1, 2), (2, 2)]

    def test_snippet_truncated(self) -> None:
        catalog = RuleCatalog([_MarkerRule()])
        line = "MARK " + "x" * 500
        findings = scan(SourceDocument(line), Language.GENERAL, catalog, snippet_max_chars=50)
        assert len(findings[0].code_snippet) == 50

    def test_max_line_length(self) -> None:
        catalog = RuleCatalog([_MarkerRule()])
        line = "x" * 5000 + " MARK"
        assert scan(SourceDocument(line), Language.GENERAL, catalog) == []
        assert scan(SourceDocument(line), Language.GENERAL, catalog, max_line_length=6000) != []

    def test_lines_always_in_range(self, catalog, vulnerable_dir) -> None:
        for path in vulnerable_dir.iterdir():
            doc = SourceDocument(path.read_text(encoding="utf-8"))
            for language in Language:
                for f in scan(doc, language, catalog):
                    assert 1 <= f.line <= f.line_end <= doc.line_count


# ---------------------------------------------------------------------------
# Severity and risk
# ---------------------------------------------------------------------------


class TestSeverity:
    def test_aggregate_empty(self) -> None:
        assert aggregate_severity([]) is None

    def test_aggregate_highest(self) -> None:
        findings = [_finding(Severity.LOW), _finding(Severity.HIGH), _finding(Severity.MEDIUM)]
        assert aggregate_severity(findings) == Severity.HIGH

    @pytest.mark.parametrize(
        ("severities", "expected"),
        [
            ([], 0),
            ([Severity.CRITICAL], 25),
            ([Severity.HIGH], 15),
            ([Severity.MEDIUM], 8),
            ([Severity.LOW], 3),
            ([Severity.HIGH, Severity.MEDIUM, Severity.LOW], 26),
            ([Severity.CRITICAL] * 5, 100),
        ],
    )
    def test_risk_score(self, severities: list[Severity], expected: int) -> None:
        assert compute_risk_score([_finding(s) for s in severities]) == expected

    def test_risk_score_monotonic(self) -> None:
        findings: list[Finding] = []
        previous = 0
        for sev in [Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL] * 3:
            findings.append(_finding(sev))
            score = compute_risk_score(findings)
            assert score >= previous
            previous = score

    @pytest.mark.parametrize(
        ("score", "level"),
        [
            (0, RiskLevel.NONE),
            (1, RiskLevel.LOW),
            (40, RiskLevel.LOW),
            (41, RiskLevel.MEDIUM),
            (70, RiskLevel.MEDIUM),
            (71, RiskLevel.HIGH),
            (100, RiskLevel.HIGH),
        ],
    )
    def test_risk_level(self, score: int, level: RiskLevel) -> None:
        assert compute_risk_level(score) == level
