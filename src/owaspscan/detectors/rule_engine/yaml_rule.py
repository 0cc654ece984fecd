# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""YAML-based custom rule: parses a YAML definition into a BaseRule-compatible object."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.core.exceptions import RuleDefinitionError
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.matchers import (
    has_unsafe_quantifier,
    line_matcher,
    window_matcher,
)
from owaspscan.remediation.transforms import annotate

_LANGUAGES_BY_NAME = {lang.value.lower(): lang for lang in Language}

# ---------------------------------------------------------------------------
# Pydantic models for YAML rule validation
# ---------------------------------------------------------------------------


def _check_regex(pattern: str) -> str:
    if not pattern.strip():
        msg = "Pattern must not be empty"
        raise ValueError(msg)
    try:
        re.compile(pattern)
    except re.error as exc:
        msg = f"Invalid regex {pattern!r}: {exc}"
        raise ValueError(msg) from exc
    return pattern


class Replacement(BaseModel):
    """A regex substitution applied to the matched fragment."""

    pattern: str
    replacement: str

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, v: str) -> str:
        return _check_regex(v)


class YamlRuleDefinition(BaseModel):
    """Schema for a single YAML rule file."""

    id: str
    title: str
    category: OwaspCategory
    severity: Severity = Severity.MEDIUM
    languages: list[Language] | None = None
    kind: Literal["line", "window"] = "line"
    window: int = Field(default=2, ge=2, le=10)
    ignore_case: bool = False
    patterns: list[str] = Field(min_length=1)
    suppress: list[str] = Field(default_factory=list)
    description: str = ""
    recommendation: str = ""
    replacements: list[Replacement] = Field(default_factory=list)
    annotation: str = ""
    enabled: bool = True

    @field_validator("id")
    @classmethod
    def _validate_id(cls, v: str) -> str:
        if not v.strip():
            msg = "Rule id must not be empty"
            raise ValueError(msg)
        return v.strip()

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, v: object) -> object:
        if isinstance(v, str):
            code = v.strip().upper().split(":")[0].lstrip("A")
            if code.isdigit():
                return int(code)
        return v

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, v: object) -> object:
        return v.title() if isinstance(v, str) else v

    @field_validator("languages", mode="before")
    @classmethod
    def _normalize_languages(cls, v: object) -> object:
        if isinstance(v, str):
            v = [v]
        if isinstance(v, list):
            return [_LANGUAGES_BY_NAME.get(str(item).lower(), item) for item in v]
        return v

    @field_validator("patterns", "suppress")
    @classmethod
    def _validate_patterns(cls, v: list[str]) -> list[str]:
        return [_check_regex(p) for p in v]


# ---------------------------------------------------------------------------
# The concrete rule class produced from YAML definitions
# ---------------------------------------------------------------------------


class YamlRule(BaseRule):
    """A detection rule instantiated from a YAML definition.

    Behaves identically to hand-coded Python rules: it is added to the
    :class:`RuleCatalog` after the built-in rules and yields standard findings.
    """

    def __init__(self, definition: YamlRuleDefinition) -> None:
        unsafe = [
            p
            for p in (*definition.patterns, *definition.suppress)
            if has_unsafe_quantifier(p)
        ]
        if unsafe:
            msg = f"Rule {definition.id} uses backtracking-prone quantifiers: {', '.join(unsafe)}"
            raise RuleDefinitionError(msg)

        self._def = definition
        flags = re.IGNORECASE if definition.ignore_case else 0
        self.rule_id = definition.id
        self.title = definition.title
        self.severity = definition.severity
        self.category = definition.category
        self.description = definition.description or definition.title
        self.recommendation = definition.recommendation
        self.enabled = definition.enabled
        self.languages = frozenset(definition.languages) if definition.languages else None
        if definition.kind == "window":
            self.matcher = window_matcher(
                *definition.patterns,
                window=definition.window,
                suppress=definition.suppress,
                flags=flags,
            )
        else:
            self.matcher = line_matcher(*definition.patterns, suppress=definition.suppress, flags=flags)
        self._replacements = [
            (re.compile(r.pattern, flags), r.replacement) for r in definition.replacements
        ]

    def rewrite(self, fragment: str, language: Language) -> str:
        text = fragment
        for pattern, replacement in self._replacements:
            text = pattern.sub(replacement, text)
        if text == fragment and self._def.annotation:
            return annotate(fragment, language, self._def.annotation)
        return text
