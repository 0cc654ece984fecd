# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Vulnerability finding models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from owaspscan.core.constants import OwaspCategory, Severity


class Finding(BaseModel):
    """A single detected vulnerability instance."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    rule_id: str = Field(description="Rule that triggered this finding, e.g. OWASP-A03-001")
    type: str = Field(description="'<category name>: <rule title>'")
    category: OwaspCategory
    severity: Severity
    line: int = Field(ge=1, description="1-indexed start line in the original source")
    line_end: int = Field(ge=1)
    description: str
    code_snippet: str = ""
    recommendation: str = ""

    @property
    def category_code(self) -> str:
        return self.category.code


class AppliedFix(BaseModel):
    """Where a finding's rewrite landed in the secure code."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    rule_id: str
    line: int = Field(ge=1)
    secure_line: int = Field(ge=1)
    secure_line_end: int = Field(ge=1)
