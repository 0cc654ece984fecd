# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Analysis result model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from owaspscan.core.constants import SEVERITY_ORDER, Language, RiskLevel, Severity
from owaspscan.models.finding import AppliedFix, Finding


class AnalysisResult(BaseModel):
    """Complete, immutable result of analyzing one source text.

    Contains no timestamps or generated ids, so analyzing the same text with
    the same rule catalog always yields an equal result.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    language: Language
    risk_score: int = Field(ge=0, le=100)
    findings: tuple[Finding, ...] = Field(default=(), alias="vulnerabilities")
    secure_code: str
    fixes: tuple[AppliedFix, ...] = ()
    source_sha256: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def risk_level(self) -> RiskLevel:
        from owaspscan.scanner.severity import compute_risk_level

        return compute_risk_level(self.risk_score)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def max_severity(self) -> Severity | None:
        from owaspscan.scanner.severity import aggregate_severity

        return aggregate_severity(self.findings)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def finding_count_by_severity(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for sev in SEVERITY_ORDER:
            n = sum(1 for f in self.findings if f.severity == sev)
            if n:
                counts[sev.value] = n
        return counts

    @property
    def is_clean(self) -> bool:
        return not self.findings
