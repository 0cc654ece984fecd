# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""JSON output formatter."""

from __future__ import annotations

import json

from owaspscan.models.analysis import AnalysisResult
from owaspscan.scanner.diff import Comparison


def format_json(result: AnalysisResult) -> str:
    """Return the analysis result as camelCase JSON."""
    return result.model_dump_json(indent=2, by_alias=True)


def format_json_summary(result: AnalysisResult) -> str:
    """Return a compact JSON summary (no findings detail or secure code)."""
    data = {
        "language": result.language.value,
        "riskScore": result.risk_score,
        "riskLevel": result.risk_level.value,
        "maxSeverity": result.max_severity.value if result.max_severity else None,
        "vulnerabilityCount": len(result.findings),
        "findingCountBySeverity": result.finding_count_by_severity,
        "sourceSha256": result.source_sha256,
    }
    return json.dumps(data, indent=2)


def format_json_comparison(result: AnalysisResult, comparison: Comparison) -> str:
    data = {
        "analysis": result.model_dump(mode="json", by_alias=True),
        "comparison": comparison.model_dump(mode="json", by_alias=True),
    }
    return json.dumps(data, indent=2)
