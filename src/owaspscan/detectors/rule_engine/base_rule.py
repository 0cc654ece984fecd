# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract base class for detection rules."""

from __future__ import annotations

import re
from abc import ABC
from collections.abc import Sequence

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.matchers import Matcher, MatchSpan, evaluate
from owaspscan.remediation.transforms import annotate

_QUOTED = (re.compile(r'"[^"\n]*"'), re.compile(r"'[^'\n]*'"))


class BaseRule(ABC):
    """All detection rules must inherit from this class.

    ``languages`` of ``None`` means the rule applies to every language,
    including General. ``rewrite`` returns the fragment unchanged when it has
    no concrete substitution, in which case ``remediate`` annotates the
    fragment with a review comment instead.
    """

    rule_id: str
    title: str
    severity: Severity
    category: OwaspCategory
    description: str
    recommendation: str = ""
    matcher: Matcher
    languages: frozenset[Language] | None = None
    enabled: bool = True
    redact_snippet: bool = False

    @property
    def finding_type(self) -> str:
        return f"{self.category.title}: {self.title}"

    def applies_to(self, language: Language) -> bool:
        return self.languages is None or language in self.languages

    def match(
        self, lines: Sequence[str], index: int, max_line_length: int = 4096
    ) -> MatchSpan | None:
        return evaluate(self.matcher, lines, index, max_line_length)

    def snippet(self, span: MatchSpan, max_chars: int = 200) -> str:
        text = "\n".join(ln.strip() for ln in span.text.splitlines())
        if self.redact_snippet:
            for pattern in _QUOTED:
                text = pattern.sub(lambda m: m.group(0)[0] + "***" + m.group(0)[0], text)
        return text[:max_chars]

    def rewrite(self, fragment: str, language: Language) -> str:
        return fragment

    def remediate(self, fragment: str, language: Language) -> str:
        """Return the secure replacement for *fragment* (may span several lines)."""
        replaced = self.rewrite(fragment, language)
        if replaced != fragment:
            return replaced
        return annotate(
            fragment,
            language,
            f"SECURITY: {self.title} ({self.category.code}). {self.recommendation}",
        )
