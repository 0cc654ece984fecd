# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Severity aggregation and risk scoring."""

from __future__ import annotations

from collections.abc import Iterable

from owaspscan.core.constants import (
    MAX_RISK_SCORE,
    RISK_THRESHOLD_HIGH,
    RISK_THRESHOLD_MEDIUM,
    SEVERITY_ORDER,
    SEVERITY_WEIGHTS,
    RiskLevel,
    Severity,
)
from owaspscan.models.finding import Finding


def aggregate_severity(findings: Iterable[Finding]) -> Severity | None:
    """Return the highest severity across all findings, or None when there are none."""
    present = {f.severity for f in findings}
    for sev in SEVERITY_ORDER:
        if sev in present:
            return sev
    return None


def compute_risk_score(findings: Iterable[Finding]) -> int:
    """Sum of severity weights, capped at 100."""
    return min(MAX_RISK_SCORE, sum(SEVERITY_WEIGHTS[f.severity] for f in findings))


def compute_risk_level(risk_score: int) -> RiskLevel:
    """Map risk score to a coarse level for display."""
    if risk_score > RISK_THRESHOLD_HIGH:
        return RiskLevel.HIGH
    if risk_score > RISK_THRESHOLD_MEDIUM:
        return RiskLevel.MEDIUM
    if risk_score > 0:
        return RiskLevel.LOW
    return RiskLevel.NONE
