# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""SARIF 2.1.0 output formatter."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from owaspscan import __version__
from owaspscan.core.constants import Severity
from owaspscan.models.analysis import AnalysisResult
from owaspscan.models.sarif import (
    SarifArtifactLocation,
    SarifDriver,
    SarifLocation,
    SarifMessage,
    SarifPhysicalLocation,
    SarifRegion,
    SarifReport,
    SarifResult,
    SarifRule,
    SarifRuleConfig,
    SarifRuleProperties,
    SarifRun,
    SarifTool,
)

SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"

SEVERITY_TO_SARIF_LEVEL = {
    Severity.CRITICAL: "error",
    Severity.HIGH: "error",
    Severity.MEDIUM: "warning",
    Severity.LOW: "note",
}


def analysis_results_to_sarif(results: Sequence[tuple[str, AnalysisResult]]) -> dict[str, Any]:
    """Convert ``(target, result)`` pairs into one SARIF 2.1.0 run."""
    rules: list[SarifRule] = []
    seen_rules: set[str] = set()
    sarif_results: list[SarifResult] = []

    for target, result in results:
        for finding in result.findings:
            level = SEVERITY_TO_SARIF_LEVEL.get(finding.severity, "warning")
            if finding.rule_id not in seen_rules:
                seen_rules.add(finding.rule_id)
                rules.append(
                    SarifRule(
                        id=finding.rule_id,
                        name=finding.rule_id.replace("-", "_"),
                        shortDescription=SarifMessage(text=finding.type),
                        fullDescription=SarifMessage(text=finding.description),
                        help=SarifMessage(text=finding.recommendation),
                        defaultConfiguration=SarifRuleConfig(level=level),
                        properties=SarifRuleProperties(
                            tags=["security", "owasp-top-10", finding.category_code],
                            owaspCategory=finding.category_code,
                        ),
                    )
                )

            sarif_results.append(
                SarifResult(
                    ruleId=finding.rule_id,
                    level=level,
                    message=SarifMessage(text=f"{finding.type}. {finding.description}"),
                    locations=[
                        SarifLocation(
                            physicalLocation=SarifPhysicalLocation(
                                artifactLocation=SarifArtifactLocation(uri=target),
                                region=SarifRegion(
                                    startLine=finding.line,
                                    endLine=finding.line_end,
                                    snippet=SarifMessage(text=finding.code_snippet),
                                ),
                            )
                        )
                    ],
                )
            )

    report = SarifReport(
        runs=[
            SarifRun(
                tool=SarifTool(driver=SarifDriver(version=__version__, rules=rules)),
                results=sarif_results,
            )
        ]
    )
    return {"$schema": SARIF_SCHEMA, **report.model_dump(exclude_none=True)}


def analysis_result_to_sarif(result: AnalysisResult, target: str = "<stdin>") -> dict[str, Any]:
    return analysis_results_to_sarif([(target, result)])


def format_sarif(result: AnalysisResult, target: str = "<stdin>") -> str:
    """Return SARIF JSON string."""
    return json.dumps(analysis_result_to_sarif(result, target), indent=2)
