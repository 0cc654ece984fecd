# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Evaluate catalog rules against every line of a document."""

from __future__ import annotations

import logging

from owaspscan.core.constants import REVIEW_NOTE, Language
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.catalog import RuleCatalog
from owaspscan.detectors.rule_engine.matchers import MatchSpan
from owaspscan.models.finding import Finding
from owaspscan.models.source import SourceDocument

logger = logging.getLogger("owaspscan.scanner")


def _to_finding(rule: BaseRule, span: MatchSpan, snippet_max_chars: int) -> Finding:
    recommendation = f"{rule.recommendation} {REVIEW_NOTE}" if rule.recommendation else REVIEW_NOTE
    return Finding(
        rule_id=rule.rule_id,
        type=rule.finding_type,
        category=rule.category,
        severity=rule.severity,
        line=span.start + 1,
        line_end=span.end + 1,
        description=rule.description,
        code_snippet=rule.snippet(span, snippet_max_chars),
        recommendation=recommendation,
    )


def scan(
    document: SourceDocument,
    language: Language,
    catalog: RuleCatalog,
    *,
    max_line_length: int = 4096,
    snippet_max_chars: int = 200,
) -> list[Finding]:
    """Run every rule that applies to *language* over *document*.

    Each rule reports at most one finding per starting line. A rule that
    raises is logged and treated as no match for that line. Findings are
    ordered by line, then by catalog order.
    """
    lines = document.lines
    findings: list[Finding] = []

    for rule in catalog.rules_for(language):
        for index in range(len(lines)):
            try:
                span = rule.match(lines, index, max_line_length)
            except Exception as exc:
                logger.warning("Rule %s failed at line %d: %s", rule.rule_id, index + 1, exc)
                continue
            if span is None:
                continue
            end = min(max(span.end, span.start), len(lines) - 1)
            if end != span.end:
                span = MatchSpan(span.start, end, span.text)
            findings.append(_to_finding(rule, span, snippet_max_chars))

    findings.sort(key=lambda f: (f.line, catalog.order_of(f.rule_id)))
    return findings
