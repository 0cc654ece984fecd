# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Secure-code synthesis: apply each finding's rule rewrite to a working copy.

The working copy holds one segment (a list of output lines) per original line.
A multi-line finding merges the segments it covers into the segment of its
first line; every later finding that targets a merged line is applied to the
owning segment, so line-count changes never shift later targets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from owaspscan.core.constants import Language
from owaspscan.models.finding import AppliedFix, Finding
from owaspscan.models.source import SourceDocument

if TYPE_CHECKING:
    from owaspscan.detectors.rule_engine.catalog import RuleCatalog

logger = logging.getLogger("owaspscan.remediation")


@dataclass(frozen=True)
class RemediationResult:
    secure_code: str
    fixes: tuple[AppliedFix, ...]


class Remediator:
    """Rewrites one document for one set of findings. Single use."""

    def __init__(
        self,
        document: SourceDocument,
        findings: list[Finding] | tuple[Finding, ...],
        catalog: RuleCatalog,
        language: Language,
        max_line_length: int = 4096,
    ) -> None:
        self._doc = document
        self._findings = sorted(findings, key=lambda f: (f.line, catalog.order_of(f.rule_id)))
        self._catalog = catalog
        self._language = language
        self._max_line_length = max_line_length
        self._segments: list[list[str]] = [[line] for line in document.lines]
        self._endings: list[str] = list(document.endings)
        self._owner: list[int] = list(range(document.line_count))

    def run(self) -> RemediationResult:
        if not self._findings:
            return RemediationResult(secure_code=self._doc.text, fixes=())

        applied: list[Finding] = []
        for finding in self._findings:
            if self._apply(finding):
                applied.append(finding)

        secure_code, starts = self._render()
        fixes = []
        for finding in applied:
            owner = self._owner[finding.line - 1]
            start = starts[owner]
            fixes.append(
                AppliedFix(
                    rule_id=finding.rule_id,
                    line=finding.line,
                    secure_line=start,
                    secure_line_end=start + len(self._segments[owner]) - 1,
                )
            )
        return RemediationResult(secure_code=secure_code, fixes=tuple(fixes))

    # ------------------------------------------------------------------

    def _merge(self, first: int, last: int) -> int:
        """Merge the segments owning original lines *first*..*last* (0-based)."""
        target = self._owner[first]
        final = self._owner[last]
        if final == target:
            return target
        merged: list[str] = []
        for seg in range(target, final + 1):
            merged.extend(self._segments[seg])
            if seg != target:
                self._segments[seg] = []
        self._segments[target] = merged
        self._endings[target] = self._endings[final]
        for idx, owner in enumerate(self._owner):
            if target <= owner <= final:
                self._owner[idx] = target
        return target

    def _apply(self, finding: Finding) -> bool:
        rule = self._catalog.get(finding.rule_id)
        if rule is None:
            logger.warning("No rule %s in catalog; finding left unremediated", finding.rule_id)
            return False

        last = min(finding.line_end, self._doc.line_count) - 1
        covered = self._doc.lines[finding.line - 1 : last + 1]
        if any(len(line) > self._max_line_length for line in covered):
            logger.info(
                "Line %d exceeds %d characters; finding %s left unremediated",
                finding.line,
                self._max_line_length,
                rule.rule_id,
            )
            return False
        seg = self._merge(finding.line - 1, last)
        fragment = "\n".join(self._segments[seg])
        try:
            replacement = rule.remediate(fragment, self._language)
        except Exception as exc:
            logger.warning("Remediation by rule %s failed at line %d: %s", rule.rule_id, finding.line, exc)
            return False
        self._segments[seg] = replacement.split("\n")
        return True

    def _newline_for(self, seg: int) -> str:
        ending = self._endings[seg]
        if ending in ("\r\n", "\n"):
            return ending
        return self._doc.newline

    def _render(self) -> tuple[str, dict[int, int]]:
        parts: list[str] = []
        starts: dict[int, int] = {}
        line_no = 1
        for seg, lines in enumerate(self._segments):
            if self._owner[seg] != seg:
                continue
            starts[seg] = line_no
            line_no += len(lines)
            parts.append(self._newline_for(seg).join(lines) + self._endings[seg])
        return "".join(parts), starts


def remediate(
    document: SourceDocument,
    findings: list[Finding] | tuple[Finding, ...],
    catalog: RuleCatalog,
    language: Language,
    max_line_length: int = 4096,
) -> str:
    """Return the secure version of *document*; the original text when *findings* is empty."""
    return Remediator(document, findings, catalog, language, max_line_length).run().secure_code
