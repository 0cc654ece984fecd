# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""A04 Insecure Design rules."""

from __future__ import annotations

import re

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.matchers import line_matcher
from owaspscan.detectors.rule_engine.registry import rule
from owaspscan.remediation.transforms import user_input_pattern, wrap_user_input


@rule
class UnvalidatedRequestInput(BaseRule):
    rule_id = "OWASP-A04-001"
    title = "Unvalidated request input"
    severity = Severity.MEDIUM
    category = OwaspCategory.INSECURE_DESIGN
    description = "A request parameter is used without server-side validation"
    recommendation = (
        "Validate type, length, and format of every request value against an "
        "allow-list before using it."
    )
    matcher = line_matcher(
        user_input_pattern(Language.GENERAL),
        suppress=[
            re.compile(
                r"validat|sanitiz|escape|htmlspecialchars|intval|filter_input|filter_var|"
                r"basename|parseInt|Number\(|\bint\(|isset\(|empty\(",
                re.IGNORECASE,
            )
        ],
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        return wrap_user_input(fragment, language, "validate_input")
